"""Tests for constraint checks and explanations."""

from bowl_builder.domain.nutrients import ConstraintSet, NutrientTotals
from bowl_builder.services.constraints import (
    FALLBACK_REASON,
    explain_violation,
    format_amount,
    totals_report,
    would_violate,
)

DEFAULTS = ConstraintSet()


def test_upper_bound_allows_exact_limit() -> None:
    assert not would_violate(NutrientTotals(calories=700), DEFAULTS, False)
    assert would_violate(NutrientTotals(calories=700.5), DEFAULTS, False)


def test_lower_bound_is_advisory_without_strict_mode() -> None:
    totals = NutrientTotals(fiber_g=0, protein_g=30)

    assert not would_violate(totals, DEFAULTS, strict_mins=False)
    assert would_violate(totals, DEFAULTS, strict_mins=True)


def test_lower_bound_allows_exact_minimum() -> None:
    totals = NutrientTotals(fiber_g=10, protein_g=20)

    assert not would_violate(totals, DEFAULTS, strict_mins=True)


def test_explain_reports_calorie_overage() -> None:
    before = NutrientTotals(calories=600)
    after = NutrientTotals(calories=800)

    assert explain_violation(before, after, DEFAULTS, False) == (
        "Would exceed calories by 100"
    )


def test_explain_uses_nutrient_table_order() -> None:
    after = NutrientTotals(calories=900, total_fat_g=25, sodium_mg=900)

    reason = explain_violation(NutrientTotals(), after, DEFAULTS, False)

    assert reason == "Would exceed calories by 200"


def test_explain_formats_units() -> None:
    fat = explain_violation(
        NutrientTotals(), NutrientTotals(total_fat_g=20.5), DEFAULTS, False
    )
    sodium = explain_violation(
        NutrientTotals(), NutrientTotals(sodium_mg=800.4), DEFAULTS, False
    )

    assert fat == "Would exceed total fat by 0.5 g"
    assert sodium == "Would exceed sodium by 100 mg"


def test_explain_reports_shortfall_in_strict_mode() -> None:
    after = NutrientTotals(fiber_g=3, protein_g=20)

    reason = explain_violation(NutrientTotals(), after, DEFAULTS, True)

    assert reason == "Would drop fiber below minimum by 7 g"


def test_explain_ignores_shortfall_without_strict_mode() -> None:
    after = NutrientTotals(fiber_g=3)

    reason = explain_violation(NutrientTotals(), after, DEFAULTS, False)

    assert reason == "Invalid change for fiber."


def test_explain_falls_back_when_nothing_changed() -> None:
    totals = NutrientTotals(calories=100)

    assert explain_violation(totals, totals, DEFAULTS, False) == FALLBACK_REASON
    assert FALLBACK_REASON == "Invalid change."


def test_format_amount_rounding() -> None:
    assert format_amount(100.4, "") == "100"
    assert format_amount(149.5, "mg") == "150 mg"
    assert format_amount(2.0, "g") == "2 g"
    assert format_amount(2.25, "g") == "2.3 g"
    assert format_amount(0.5, "") == "1"


def test_totals_report_lines() -> None:
    report = totals_report(NutrientTotals(calories=600, protein_g=20), DEFAULTS)
    lines = {line.key: line for line in report}

    assert [line.key for line in report][0] == "calories"
    assert lines["calories"].passed
    assert lines["calories"].remaining == "100 left"
    assert not lines["fiber_g"].passed
    assert lines["fiber_g"].remaining == "10 g needed"
    assert lines["protein_g"].passed
    assert lines["protein_g"].remaining == "0 g above min"


def test_totals_report_clamps_upper_remaining() -> None:
    report = totals_report(NutrientTotals(sodium_mg=900), DEFAULTS)
    sodium = next(line for line in report if line.key == "sodium_mg")

    assert not sodium.passed
    assert sodium.remaining == "0 mg left"


def test_constraint_set_coerces_bad_input() -> None:
    limits = ConstraintSet.from_mapping(
        {"calories": "abc", "sodium_mg": "500", "sugar_g": float("nan")}
    )

    assert limits.calories == 0
    assert limits.sodium_mg == 500
    assert limits.sugar_g == 0
    assert limits.fiber_g == DEFAULTS.fiber_g
