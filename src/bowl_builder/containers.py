"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from bowl_builder.adapters.catalog_source import (
    CatalogSource,
    FileCatalogSource,
    HttpxCatalogSource,
)
from bowl_builder.config import Settings, parse_category_order
from bowl_builder.services.bowls import BowlService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    catalog_source: CatalogSource
    category_order: tuple[str, ...]
    close_resources: Callable[[], Awaitable[None]]
    bowl_service: BowlService | None = None

    async def start(self) -> BowlService:
        """Load the catalog once and build the bowl service."""
        if self.bowl_service is None:
            catalog = await self.catalog_source.load()
            self.bowl_service = BowlService(
                catalog=catalog, category_order=self.category_order
            )
        return self.bowl_service


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    catalog_source: FileCatalogSource | HttpxCatalogSource
    if resolved_settings.catalog_url:
        catalog_source = HttpxCatalogSource.create(
            resolved_settings.catalog_url,
            timeout_seconds=resolved_settings.catalog_timeout_seconds,
        )
    else:
        catalog_source = FileCatalogSource(Path(resolved_settings.catalog_path))

    async def close_resources() -> None:
        await catalog_source.close()

    return AppContainer(
        settings=resolved_settings,
        catalog_source=catalog_source,
        category_order=parse_category_order(resolved_settings.category_order),
        close_resources=close_resources,
    )
