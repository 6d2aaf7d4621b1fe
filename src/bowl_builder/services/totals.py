"""Nutrient totals for a portion selection."""

from collections.abc import Mapping

from bowl_builder.domain.catalog import Menu
from bowl_builder.domain.nutrients import NUTRIENT_KEYS, NutrientTotals


def compute_totals(portions: Mapping[str, float], menu: Menu) -> NutrientTotals:
    """Sum nutrient values weighted by portion over the menu's ingredients."""
    totals = dict.fromkeys(NUTRIENT_KEYS, 0.0)
    for ingredient in menu.ingredients():
        portion = portions.get(ingredient.id, 0)
        if not portion:
            continue
        for key in NUTRIENT_KEYS:
            totals[key] += ingredient.nutrient(key) * portion
    return NutrientTotals(**totals)
