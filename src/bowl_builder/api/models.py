"""Pydantic models for bowl API requests."""

from pydantic import BaseModel, Field, field_validator

from bowl_builder.domain.nutrients import PORTION_OPTIONS


class PortionChangeRequest(BaseModel):
    """Requested portion for one ingredient."""

    ingredient_id: str
    portion: float

    @field_validator("portion")
    @classmethod
    def check_portion(cls, value: float) -> float:
        if value not in PORTION_OPTIONS:
            raise ValueError(f"portion must be one of {list(PORTION_OPTIONS)}")
        return value


class StrictMinsRequest(BaseModel):
    """Toggle for strict minimum enforcement."""

    enabled: bool


class MenuSelectionRequest(BaseModel):
    """Menu to switch the bowl to."""

    menu_id: str


class TotalsRequest(BaseModel):
    """What-if totals for an arbitrary selection."""

    menu_id: str
    portions: dict[str, float] = Field(default_factory=dict)

    @field_validator("portions")
    @classmethod
    def drop_unsupported_portions(cls, value: dict[str, float]) -> dict[str, float]:
        return {
            ingredient_id: portion
            for ingredient_id, portion in value.items()
            if portion in PORTION_OPTIONS
        }
