"""Domain models for bowl configurations."""

from dataclasses import dataclass, field

from bowl_builder.domain.nutrients import ConstraintSet, NutrientTotals


@dataclass
class BowlConfiguration:
    """Full addressable state of one bowl session."""

    menu_id: str
    constraints: ConstraintSet = field(default_factory=ConstraintSet)
    portions: dict[str, float] = field(default_factory=dict)
    strict_mins: bool = False

    def portion(self, ingredient_id: str) -> float:
        """Return the current portion for an ingredient, 0 when unset."""
        return self.portions.get(ingredient_id, 0)


@dataclass(frozen=True)
class DecodedBowl:
    """Untrusted bowl fragment read from a share token."""

    menu_id: object
    constraints: dict[str, object]
    portions: dict[str, object]
    strict_mins: bool


@dataclass(frozen=True)
class DiscardedField:
    """A decoded value that reconciliation refused to apply."""

    field: str
    key: str | None
    value: object
    reason: str


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of merging a decoded fragment into a session."""

    configuration: BowlConfiguration
    discarded: list[DiscardedField]
    within_limits: bool


@dataclass(frozen=True)
class PortionChangeResult:
    """Outcome of a requested portion change."""

    accepted: bool
    totals: NutrientTotals
    reason: str | None = None


@dataclass(frozen=True)
class PortionOption:
    """One selectable portion button for an ingredient."""

    portion: float
    is_current: bool
    disabled: bool
    reason: str


@dataclass(frozen=True)
class IngredientOptions:
    """Portion choices for a single ingredient."""

    ingredient_id: str
    name: str
    category_id: str
    current_portion: float
    options: list[PortionOption]
    reason: str


@dataclass(frozen=True)
class NutrientStatus:
    """Pass/fail line for the totals panel."""

    key: str
    label: str
    unit: str
    direction: str
    value: float
    limit: float
    passed: bool
    remaining: str
