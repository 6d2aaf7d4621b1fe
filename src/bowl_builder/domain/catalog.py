"""Catalog models for menus, categories and ingredients."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from bowl_builder.domain.nutrients import NUTRIENT_KEYS, to_finite_number

DEFAULT_CATEGORY_ORDER: tuple[str, ...] = (
    "base",
    "proteins",
    "toppings",
    "sauces",
    "extras",
)


class Ingredient(BaseModel):
    """Single selectable ingredient with per-portion nutrient values."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    calories: float = 0.0
    total_fat_g: float = 0.0
    sat_fat_g: float = 0.0
    cholesterol_mg: float = 0.0
    sodium_mg: float = 0.0
    sugar_g: float = 0.0
    fiber_g: float = 0.0
    protein_g: float = 0.0

    @field_validator(*NUTRIENT_KEYS, mode="before")
    @classmethod
    def coerce_nutrient(cls, value: object) -> float:
        number = to_finite_number(value)
        if number is None or number < 0:
            return 0.0
        return number

    def nutrient(self, key: str) -> float:
        """Return the value of a nutrient for one portion."""
        return getattr(self, key)


class Category(BaseModel):
    """Group of ingredients within a menu."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    ingredients: tuple[Ingredient, ...] = ()


class Menu(BaseModel):
    """A restaurant menu made of categories."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    categories: tuple[Category, ...] = ()

    def ingredients(self) -> list[Ingredient]:
        """Return all ingredients in declared category order."""
        return [
            ingredient
            for category in self.categories
            for ingredient in category.ingredients
        ]

    def ingredient_ids(self) -> set[str]:
        """Return the ids of every ingredient on the menu."""
        return {ingredient.id for ingredient in self.ingredients()}

    def category(self, category_id: str) -> Category | None:
        """Return a category by id, if present."""
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def ordered_categories(
        self, order: tuple[str, ...] = DEFAULT_CATEGORY_ORDER
    ) -> list[Category]:
        """Return categories sorted by the canonical display order."""
        rank = {category_id: index for index, category_id in enumerate(order)}
        return sorted(
            self.categories,
            key=lambda category: rank.get(category.id, len(order)),
        )


class Catalog(BaseModel):
    """All menus available to the application."""

    model_config = ConfigDict(frozen=True)

    menus: tuple[Menu, ...] = Field(
        default=(), validation_alias=AliasChoices("menus", "restaurants")
    )

    def menu(self, menu_id: object) -> Menu | None:
        """Return a menu by id, if present."""
        for menu in self.menus:
            if menu.id == menu_id:
                return menu
        return None

    def default_menu(self) -> Menu:
        """Return the menu selected for new bowls."""
        if not self.menus:
            raise RuntimeError("Catalog has no menus")
        return self.menus[0]
