"""Constraint checks and user-facing explanations."""

import math

from bowl_builder.domain.bowls import NutrientStatus
from bowl_builder.domain.nutrients import (
    NUTRIENT_SPECS,
    ConstraintSet,
    NutrientDirection,
    NutrientSpec,
    NutrientTotals,
)

FALLBACK_REASON = "Invalid change."


def would_violate(
    totals: NutrientTotals, constraints: ConstraintSet, strict_mins: bool
) -> bool:
    """Return True when any nutrient total breaks its limit."""
    return any(
        _violates(spec, totals.get(spec.key), constraints.get(spec.key), strict_mins)
        for spec in NUTRIENT_SPECS
    )


def explain_violation(
    before: NutrientTotals,
    after: NutrientTotals,
    constraints: ConstraintSet,
    strict_mins: bool,
) -> str:
    """Describe why moving from ``before`` to ``after`` is not allowed.

    The first violated nutrient in table order wins. If none is violated,
    the first nutrient whose total changed is named, and when nothing
    changed a generic message is returned.
    """
    for spec in NUTRIENT_SPECS:
        value = after.get(spec.key)
        limit = constraints.get(spec.key)
        if not _violates(spec, value, limit, strict_mins):
            continue
        label = spec.label.lower()
        if spec.direction is NutrientDirection.UPPER_BOUND:
            return f"Would exceed {label} by {format_amount(value - limit, spec.unit)}"
        return (
            f"Would drop {label} below minimum by "
            f"{format_amount(limit - value, spec.unit)}"
        )

    for spec in NUTRIENT_SPECS:
        if before.get(spec.key) != after.get(spec.key):
            return f"Invalid change for {spec.label.lower()}."
    return FALLBACK_REASON


def totals_report(
    totals: NutrientTotals, constraints: ConstraintSet
) -> list[NutrientStatus]:
    """Build the pass/fail summary shown next to the bowl."""
    report: list[NutrientStatus] = []
    for spec in NUTRIENT_SPECS:
        value = totals.get(spec.key)
        limit = constraints.get(spec.key)
        if spec.direction is NutrientDirection.UPPER_BOUND:
            passed = value <= limit
            remaining = f"{format_amount(max(limit - value, 0), spec.unit)} left"
        else:
            passed = value >= limit
            surplus = value - limit
            if surplus >= 0:
                remaining = f"{format_amount(surplus, spec.unit)} above min"
            else:
                remaining = f"{format_amount(abs(surplus), spec.unit)} needed"
        report.append(
            NutrientStatus(
                key=spec.key,
                label=spec.label,
                unit=spec.unit,
                direction=spec.direction.value,
                value=value,
                limit=limit,
                passed=passed,
                remaining=remaining,
            )
        )
    return report


def format_amount(value: float, unit: str) -> str:
    """Round a quantity for display and append its unit."""
    if unit in {"", "mg"}:
        text = str(_round_half_up(value, 0))
    else:
        rounded = _round_half_up(value, 1)
        text = f"{rounded:.1f}".removesuffix(".0")
    return f"{text} {unit}" if unit else text


def _round_half_up(value: float, digits: int) -> float | int:
    factor = 10**digits
    rounded = math.floor(value * factor + 0.5) / factor
    if digits == 0:
        return int(rounded)
    return rounded


def _violates(
    spec: NutrientSpec, value: float, limit: float, strict_mins: bool
) -> bool:
    if spec.direction is NutrientDirection.UPPER_BOUND:
        return value > limit
    return strict_mins and value < limit
