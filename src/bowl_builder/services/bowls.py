"""Portion selection state machine for a bowl session."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from bowl_builder.domain.bowls import (
    BowlConfiguration,
    IngredientOptions,
    NutrientStatus,
    PortionChangeResult,
    PortionOption,
    ReconcileResult,
)
from bowl_builder.domain.catalog import DEFAULT_CATEGORY_ORDER, Catalog, Menu
from bowl_builder.domain.nutrients import PORTION_OPTIONS, ConstraintSet
from bowl_builder.services.constraints import (
    explain_violation,
    totals_report,
    would_violate,
)
from bowl_builder.services.reconciler import reconcile
from bowl_builder.services.share_codec import decode_bowl, encode_bowl
from bowl_builder.services.totals import compute_totals

CLEAR_CATEGORY_REJECTED = "Cannot clear category under strict minimum constraints."

_logger = logging.getLogger(__name__)


@dataclass
class BowlService:
    """Application service that owns every mutation of a bowl."""

    catalog: Catalog
    category_order: tuple[str, ...] = DEFAULT_CATEGORY_ORDER

    def new_bowl(self, menu_id: str | None = None) -> BowlConfiguration:
        """Create a bowl with default limits and an empty selection."""
        menu = self.catalog.menu(menu_id) if menu_id else None
        bowl = BowlConfiguration(menu_id=(menu or self.catalog.default_menu()).id)
        self.reset_portions(bowl)
        return bowl

    def menu_for(self, bowl: BowlConfiguration) -> Menu:
        """Return the active menu, falling back to the default one."""
        return self.catalog.menu(bowl.menu_id) or self.catalog.default_menu()

    def set_portion(
        self, bowl: BowlConfiguration, ingredient_id: str, portion: float
    ) -> PortionChangeResult:
        """Apply a single portion change if it keeps the bowl within limits."""
        menu = self.menu_for(bowl)
        before = compute_totals(bowl.portions, menu)
        if ingredient_id not in menu.ingredient_ids():
            return PortionChangeResult(
                accepted=False, totals=before, reason="Unknown ingredient."
            )
        if isinstance(portion, bool) or portion not in PORTION_OPTIONS:
            return PortionChangeResult(
                accepted=False, totals=before, reason="Unsupported portion."
            )
        if bowl.portion(ingredient_id) == portion:
            return PortionChangeResult(accepted=True, totals=before)

        candidate = {**bowl.portions, ingredient_id: portion}
        after = compute_totals(candidate, menu)
        if would_violate(after, bowl.constraints, bowl.strict_mins):
            reason = explain_violation(
                before, after, bowl.constraints, bowl.strict_mins
            )
            _logger.debug("Rejected %s=%s: %s", ingredient_id, portion, reason)
            return PortionChangeResult(accepted=False, totals=before, reason=reason)

        bowl.portions = candidate
        return PortionChangeResult(accepted=True, totals=after)

    def clear_category(
        self, bowl: BowlConfiguration, category_id: str
    ) -> PortionChangeResult:
        """Set every ingredient of a category to zero, all or nothing."""
        menu = self.menu_for(bowl)
        before = compute_totals(bowl.portions, menu)
        category = menu.category(category_id)
        if category is None:
            return PortionChangeResult(
                accepted=False, totals=before, reason="Unknown category."
            )

        candidate = dict(bowl.portions)
        for ingredient in category.ingredients:
            candidate[ingredient.id] = 0
        if all(
            bowl.portion(ingredient.id) == 0 for ingredient in category.ingredients
        ):
            bowl.portions = candidate
            return PortionChangeResult(accepted=True, totals=before)

        after = compute_totals(candidate, menu)
        if would_violate(after, bowl.constraints, bowl.strict_mins):
            _logger.debug("Rejected clearing category %s", category_id)
            return PortionChangeResult(
                accepted=False, totals=before, reason=CLEAR_CATEGORY_REJECTED
            )

        bowl.portions = candidate
        return PortionChangeResult(accepted=True, totals=after)

    def reset_portions(self, bowl: BowlConfiguration) -> None:
        """Set every ingredient of the active menu to zero."""
        bowl.portions = dict.fromkeys(self.menu_for(bowl).ingredient_ids(), 0)

    def select_menu(self, bowl: BowlConfiguration, menu_id: str) -> bool:
        """Switch menus and clear the selection; unknown ids are refused."""
        if self.catalog.menu(menu_id) is None:
            return False
        bowl.menu_id = menu_id
        self.reset_portions(bowl)
        return True

    def update_constraints(
        self, bowl: BowlConfiguration, raw: Mapping[str, object]
    ) -> None:
        """Replace limits from user input, coercing bad values to zero."""
        bowl.constraints = ConstraintSet.from_mapping(raw, bowl.constraints)

    def restore_defaults(
        self, bowl: BowlConfiguration, reset_strict: bool = False
    ) -> None:
        """Restore default limits, optionally turning strict minimums off."""
        bowl.constraints = ConstraintSet()
        if reset_strict:
            bowl.strict_mins = False

    def set_strict_mins(self, bowl: BowlConfiguration, enabled: bool) -> None:
        """Toggle whether lower-bound limits block changes."""
        bowl.strict_mins = enabled

    def totals_report(self, bowl: BowlConfiguration) -> list[NutrientStatus]:
        """Return the pass/fail summary for the current selection."""
        totals = compute_totals(bowl.portions, self.menu_for(bowl))
        return totals_report(totals, bowl.constraints)

    def portion_options(self, bowl: BowlConfiguration) -> list[IngredientOptions]:
        """Return, per ingredient, which portions can be picked and why not."""
        menu = self.menu_for(bowl)
        before = compute_totals(bowl.portions, menu)
        rows: list[IngredientOptions] = []
        for category in menu.ordered_categories(self.category_order):
            for ingredient in category.ingredients:
                current = bowl.portion(ingredient.id)
                options: list[PortionOption] = []
                for portion in PORTION_OPTIONS:
                    is_current = portion == current
                    after = compute_totals(
                        {**bowl.portions, ingredient.id: portion}, menu
                    )
                    disabled = not is_current and would_violate(
                        after, bowl.constraints, bowl.strict_mins
                    )
                    reason = (
                        explain_violation(
                            before, after, bowl.constraints, bowl.strict_mins
                        )
                        if disabled
                        else ""
                    )
                    options.append(
                        PortionOption(
                            portion=portion,
                            is_current=is_current,
                            disabled=disabled,
                            reason=reason,
                        )
                    )
                rows.append(
                    IngredientOptions(
                        ingredient_id=ingredient.id,
                        name=ingredient.name,
                        category_id=category.id,
                        current_portion=current,
                        options=options,
                        reason=next(
                            (option.reason for option in options if option.disabled),
                            "",
                        ),
                    )
                )
        return rows

    def encode(self, bowl: BowlConfiguration) -> str:
        """Return the share token for a bowl."""
        return encode_bowl(bowl)

    def restore(self, token: str | None) -> ReconcileResult:
        """Rebuild a bowl from a share token, starting from defaults."""
        return reconcile(decode_bowl(token), self.catalog, self.new_bowl())
