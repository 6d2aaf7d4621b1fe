"""Best-effort merge of decoded share state into a live session."""

import logging

from bowl_builder.domain.bowls import (
    BowlConfiguration,
    DecodedBowl,
    DiscardedField,
    ReconcileResult,
)
from bowl_builder.domain.catalog import Catalog
from bowl_builder.domain.nutrients import (
    NUTRIENT_KEYS,
    PORTION_OPTIONS,
    ConstraintSet,
    to_finite_number,
)
from bowl_builder.services.constraints import would_violate
from bowl_builder.services.totals import compute_totals

_logger = logging.getLogger(__name__)


def reconcile(
    decoded: DecodedBowl | None,
    catalog: Catalog,
    current: BowlConfiguration,
) -> ReconcileResult:
    """Merge an untrusted fragment into ``current`` against the live catalog.

    Values that do not fit the catalog or the nutrient model are dropped
    and reported in ``discarded``. The merged bowl is not re-validated;
    ``within_limits`` tells whether it would pass the constraint check.
    """
    if decoded is None:
        return ReconcileResult(
            configuration=current,
            discarded=[],
            within_limits=_within_limits(current, catalog),
        )

    discarded: list[DiscardedField] = []

    menu_id = current.menu_id
    if decoded.menu_id is not None and catalog.menu(decoded.menu_id) is not None:
        menu_id = str(decoded.menu_id)
    elif decoded.menu_id is not None:
        discarded.append(
            DiscardedField("menu_id", None, decoded.menu_id, "unknown menu")
        )

    limits = current.constraints.as_dict()
    for key in NUTRIENT_KEYS:
        if key not in decoded.constraints:
            continue
        value = to_finite_number(decoded.constraints[key])
        if value is None:
            discarded.append(
                DiscardedField(
                    "constraints", key, decoded.constraints[key], "not a number"
                )
            )
            continue
        limits[key] = value

    menu = catalog.menu(menu_id) or catalog.default_menu()
    ingredient_ids = menu.ingredient_ids()
    portions = dict.fromkeys(ingredient_ids, 0.0)
    for ingredient_id, raw_portion in decoded.portions.items():
        if ingredient_id not in ingredient_ids:
            discarded.append(
                DiscardedField(
                    "portions", ingredient_id, raw_portion, "unknown ingredient"
                )
            )
            continue
        portion = to_finite_number(raw_portion)
        if portion is None or portion not in PORTION_OPTIONS:
            discarded.append(
                DiscardedField(
                    "portions", ingredient_id, raw_portion, "unsupported portion"
                )
            )
            continue
        portions[ingredient_id] = portion

    configuration = BowlConfiguration(
        menu_id=menu.id,
        constraints=ConstraintSet(**limits),
        portions=portions,
        strict_mins=decoded.strict_mins,
    )
    within_limits = _within_limits(configuration, catalog)
    if discarded:
        _logger.info("Discarded %s decoded field(s) during reconcile", len(discarded))
    if not within_limits:
        _logger.info("Restored bowl exceeds its limits: menu=%s", menu.id)
    return ReconcileResult(
        configuration=configuration,
        discarded=discarded,
        within_limits=within_limits,
    )


def _within_limits(bowl: BowlConfiguration, catalog: Catalog) -> bool:
    menu = catalog.menu(bowl.menu_id)
    if menu is None:
        return True
    totals = compute_totals(bowl.portions, menu)
    return not would_violate(totals, bowl.constraints, bowl.strict_mins)
