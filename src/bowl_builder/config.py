"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from bowl_builder.domain.catalog import DEFAULT_CATEGORY_ORDER

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    catalog_path: str = "data/restaurants.json"
    catalog_url: str | None = None
    catalog_timeout_seconds: float = 15
    category_order: str | None = None
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_category_order(raw: str | None) -> tuple[str, ...]:
    """Parse the category display order from env."""
    if raw is None:
        return DEFAULT_CATEGORY_ORDER
    order: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value and value not in order:
            order.append(value)
    return tuple(order) or DEFAULT_CATEGORY_ORDER
