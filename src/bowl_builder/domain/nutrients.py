"""Nutrient table, limits and totals."""

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from enum import StrEnum

PORTION_OPTIONS: tuple[float, ...] = (0, 0.5, 1, 2)


class NutrientDirection(StrEnum):
    """Whether a limit is a ceiling or a floor."""

    UPPER_BOUND = "max"
    LOWER_BOUND = "min"


@dataclass(frozen=True)
class NutrientSpec:
    """Static description of a tracked nutrient."""

    key: str
    label: str
    unit: str
    direction: NutrientDirection


NUTRIENT_SPECS: tuple[NutrientSpec, ...] = (
    NutrientSpec("calories", "Calories", "", NutrientDirection.UPPER_BOUND),
    NutrientSpec("total_fat_g", "Total Fat", "g", NutrientDirection.UPPER_BOUND),
    NutrientSpec("sat_fat_g", "Saturated Fat", "g", NutrientDirection.UPPER_BOUND),
    NutrientSpec(
        "cholesterol_mg", "Cholesterol", "mg", NutrientDirection.UPPER_BOUND
    ),
    NutrientSpec("sodium_mg", "Sodium", "mg", NutrientDirection.UPPER_BOUND),
    NutrientSpec("sugar_g", "Sugar", "g", NutrientDirection.UPPER_BOUND),
    NutrientSpec("fiber_g", "Fiber", "g", NutrientDirection.LOWER_BOUND),
    NutrientSpec("protein_g", "Protein", "g", NutrientDirection.LOWER_BOUND),
)

NUTRIENT_KEYS: tuple[str, ...] = tuple(spec.key for spec in NUTRIENT_SPECS)


@dataclass(frozen=True)
class NutrientTotals:
    """Summed nutrient values for a bowl."""

    calories: float = 0.0
    total_fat_g: float = 0.0
    sat_fat_g: float = 0.0
    cholesterol_mg: float = 0.0
    sodium_mg: float = 0.0
    sugar_g: float = 0.0
    fiber_g: float = 0.0
    protein_g: float = 0.0

    def get(self, key: str) -> float:
        """Return the total for a nutrient key."""
        return getattr(self, key)

    def as_dict(self) -> dict[str, float]:
        """Return totals keyed by nutrient."""
        return asdict(self)


@dataclass(frozen=True)
class ConstraintSet:
    """Limits for all eight nutrients."""

    calories: float = 700
    total_fat_g: float = 20
    sat_fat_g: float = 5
    cholesterol_mg: float = 100
    sodium_mg: float = 700
    sugar_g: float = 12
    fiber_g: float = 10
    protein_g: float = 20

    def get(self, key: str) -> float:
        """Return the limit for a nutrient key."""
        return getattr(self, key)

    def as_dict(self) -> dict[str, float]:
        """Return limits keyed by nutrient."""
        return asdict(self)

    @classmethod
    def from_mapping(
        cls, raw: Mapping[str, object], fallback: "ConstraintSet | None" = None
    ) -> "ConstraintSet":
        """Build limits from user input.

        Keys absent from ``raw`` keep the fallback value. Values that are
        present but not finite numbers are coerced to 0.
        """
        base = fallback or cls()
        values: dict[str, float] = {}
        for item in fields(cls):
            if item.name not in raw:
                values[item.name] = base.get(item.name)
                continue
            parsed = to_finite_number(raw[item.name])
            values[item.name] = 0.0 if parsed is None else parsed
        return cls(**values)


def to_finite_number(value: object) -> float | None:
    """Convert a value to a finite float, or None when it is not one."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip() or "0")
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number
