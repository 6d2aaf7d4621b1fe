"""Catalog loaders for local files and HTTP endpoints."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx

from bowl_builder.domain.catalog import Catalog

_logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    """Interface for loading the menu catalog."""

    async def load(self) -> Catalog:
        """Load and return the catalog."""

    async def close(self) -> None:
        """Release resources held by the source."""


def parse_catalog(payload: object) -> Catalog:
    """Validate a raw catalog document, refusing one without menus."""
    catalog = Catalog.model_validate(payload)
    if not catalog.menus:
        raise RuntimeError("No restaurants found in catalog")
    return catalog


@dataclass
class FileCatalogSource(CatalogSource):
    """Catalog stored as a JSON file."""

    path: Path

    async def load(self) -> Catalog:
        """Read and validate the catalog file."""
        if not self.path.is_file():
            raise RuntimeError(f"Catalog file not found: {self.path}")
        catalog = parse_catalog(json.loads(self.path.read_text(encoding="utf-8")))
        _logger.info("Loaded catalog from %s: menus=%s", self.path, len(catalog.menus))
        return catalog

    async def close(self) -> None:
        """Nothing to release for file sources."""


@dataclass
class HttpxCatalogSource(CatalogSource):
    """Catalog served over HTTP."""

    url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15

    @classmethod
    def create(cls, url: str, timeout_seconds: float = 15) -> "HttpxCatalogSource":
        """Create a catalog source with a managed httpx session."""
        return cls(
            url=url,
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def load(self) -> Catalog:
        """Fetch and validate the catalog document."""
        response = await self.http_client.get(self.url, timeout=self.timeout_seconds)
        response.raise_for_status()
        catalog = parse_catalog(response.json())
        _logger.info("Loaded catalog from %s: menus=%s", self.url, len(catalog.menus))
        return catalog

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
