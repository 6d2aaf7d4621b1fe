"""Shared test fixtures."""

from pathlib import Path

import pytest

from bowl_builder.adapters.catalog_source import FileCatalogSource, parse_catalog
from bowl_builder.config import Settings
from bowl_builder.containers import AppContainer
from bowl_builder.domain.catalog import Catalog, Menu
from bowl_builder.services.bowls import BowlService

CATALOG_DOCUMENT: dict[str, object] = {
    "restaurants": [
        {
            "id": "grill",
            "name": "Test Grill",
            "categories": [
                {
                    "id": "proteins",
                    "label": "Proteins",
                    "ingredients": [
                        {
                            "id": "steak",
                            "name": "Steak",
                            "calories": 300,
                            "protein_g": 10,
                        },
                        {
                            "id": "tofu",
                            "name": "Tofu",
                            "calories": 100,
                            "total_fat_g": 6,
                            "sodium_mg": 200,
                            "fiber_g": 2,
                            "protein_g": 9,
                        },
                    ],
                },
                {
                    "id": "base",
                    "label": "Base",
                    "ingredients": [
                        {
                            "id": "rice",
                            "name": "Rice",
                            "calories": 200,
                            "total_fat_g": 2.5,
                            "sodium_mg": 150,
                            "fiber_g": 1,
                            "protein_g": 4,
                        },
                        {
                            "id": "greens",
                            "name": "Greens",
                            "calories": 10,
                            "fiber_g": 3,
                            "protein_g": 1,
                        },
                    ],
                },
            ],
        },
        {
            "id": "deli",
            "name": "Test Deli",
            "categories": [
                {
                    "id": "extras",
                    "label": "Extras",
                    "ingredients": [
                        {"id": "pickle", "name": "Pickle", "sodium_mg": 300},
                    ],
                }
            ],
        },
    ]
}


@pytest.fixture
def catalog() -> Catalog:
    return parse_catalog(CATALOG_DOCUMENT)


@pytest.fixture
def menu(catalog: Catalog) -> Menu:
    return catalog.default_menu()


@pytest.fixture
def bowl_service(catalog: Catalog) -> BowlService:
    return BowlService(catalog)


@pytest.fixture
def settings() -> Settings:
    return Settings(catalog_path="missing.json")


@pytest.fixture
def container(settings: Settings, bowl_service: BowlService) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        catalog_source=FileCatalogSource(Path(settings.catalog_path)),
        category_order=bowl_service.category_order,
        close_resources=close_resources,
        bowl_service=bowl_service,
    )
