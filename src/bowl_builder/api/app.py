"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, status

from bowl_builder.api.models import (
    MenuSelectionRequest,
    PortionChangeRequest,
    StrictMinsRequest,
    TotalsRequest,
)
from bowl_builder.app_logging import configure_logging
from bowl_builder.containers import AppContainer
from bowl_builder.domain.bowls import (
    BowlConfiguration,
    DiscardedField,
    PortionChangeResult,
)
from bowl_builder.domain.nutrients import NUTRIENT_SPECS
from bowl_builder.services.bowls import BowlService
from bowl_builder.services.totals import compute_totals


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.start()
        except Exception:
            logger.exception("Failed to load the catalog")
            raise
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/nutrients")
    async def nutrients() -> dict[str, object]:
        """Return the tracked nutrients in display order."""
        return {"nutrients": [asdict(spec) for spec in NUTRIENT_SPECS]}

    @app.get("/menus")
    async def menus(request: Request) -> dict[str, object]:
        """Return the catalog with categories in display order."""
        service = _bowl_service(request)
        return {
            "menus": [
                {
                    "id": menu.id,
                    "name": menu.name,
                    "categories": [
                        category.model_dump()
                        for category in menu.ordered_categories(
                            service.category_order
                        )
                    ],
                }
                for menu in service.catalog.menus
            ]
        }

    @app.get("/bowls/new")
    async def new_bowl(request: Request, menu_id: str | None = None) -> dict:
        """Return an empty bowl with default limits."""
        service = _bowl_service(request)
        if menu_id is not None and service.catalog.menu(menu_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _bowl_view(service, service.new_bowl(menu_id))

    @app.get("/bowls/{token}")
    async def get_bowl(token: str, request: Request) -> dict:
        """Restore a bowl from a share token."""
        service = _bowl_service(request)
        result = service.restore(token)
        return _bowl_view(service, result.configuration, result.discarded)

    @app.post("/bowls/{token}/portions")
    async def change_portion(
        token: str, payload: PortionChangeRequest, request: Request
    ) -> dict:
        """Apply a portion change or explain why it is refused."""
        service = _bowl_service(request)
        bowl = service.restore(token).configuration
        if payload.ingredient_id not in service.menu_for(bowl).ingredient_ids():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        result = service.set_portion(bowl, payload.ingredient_id, payload.portion)
        return _change_view(service, bowl, result)

    @app.post("/bowls/{token}/categories/{category_id}/clear")
    async def clear_category(token: str, category_id: str, request: Request) -> dict:
        """Clear a whole category if the bowl stays within limits."""
        service = _bowl_service(request)
        bowl = service.restore(token).configuration
        if service.menu_for(bowl).category(category_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        result = service.clear_category(bowl, category_id)
        return _change_view(service, bowl, result)

    @app.post("/bowls/{token}/reset")
    async def reset_bowl(token: str, request: Request) -> dict:
        """Clear every portion while keeping limits and menu."""
        service = _bowl_service(request)
        bowl = service.restore(token).configuration
        service.reset_portions(bowl)
        return _bowl_view(service, bowl)

    @app.put("/bowls/{token}/constraints")
    async def update_constraints(
        token: str, payload: dict[str, object], request: Request
    ) -> dict:
        """Edit nutrient limits; bad values become zero."""
        service = _bowl_service(request)
        bowl = service.restore(token).configuration
        service.update_constraints(bowl, payload)
        return _bowl_view(service, bowl)

    @app.post("/bowls/{token}/constraints/defaults")
    async def restore_defaults(
        token: str, request: Request, reset_strict: bool = False
    ) -> dict:
        """Restore the default limits."""
        service = _bowl_service(request)
        bowl = service.restore(token).configuration
        service.restore_defaults(bowl, reset_strict=reset_strict)
        return _bowl_view(service, bowl)

    @app.put("/bowls/{token}/strict-mins")
    async def set_strict_mins(
        token: str, payload: StrictMinsRequest, request: Request
    ) -> dict:
        """Toggle strict minimum enforcement."""
        service = _bowl_service(request)
        bowl = service.restore(token).configuration
        service.set_strict_mins(bowl, payload.enabled)
        return _bowl_view(service, bowl)

    @app.put("/bowls/{token}/menu")
    async def select_menu(
        token: str, payload: MenuSelectionRequest, request: Request
    ) -> dict:
        """Switch to another menu, which empties the bowl."""
        service = _bowl_service(request)
        bowl = service.restore(token).configuration
        if not service.select_menu(bowl, payload.menu_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _bowl_view(service, bowl)

    @app.post("/totals")
    async def totals(payload: TotalsRequest, request: Request) -> dict:
        """Compute totals for a selection without touching any bowl."""
        service = _bowl_service(request)
        menu = service.catalog.menu(payload.menu_id)
        if menu is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"totals": compute_totals(payload.portions, menu).as_dict()}

    return app


def _bowl_service(request: Request) -> BowlService:
    container: AppContainer = request.app.state.container
    if container.bowl_service is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
    return container.bowl_service


def _bowl_view(
    service: BowlService,
    bowl: BowlConfiguration,
    discarded: list[DiscardedField] | None = None,
) -> dict[str, object]:
    """Render a bowl with everything a client needs to draw it."""
    return {
        "token": service.encode(bowl),
        "menu_id": bowl.menu_id,
        "constraints": bowl.constraints.as_dict(),
        "portions": {
            ingredient_id: portion
            for ingredient_id, portion in bowl.portions.items()
            if portion
        },
        "strict_mins": bool(bowl.strict_mins),
        "totals": [asdict(line) for line in service.totals_report(bowl)],
        "ingredients": [asdict(row) for row in service.portion_options(bowl)],
        "discarded": [asdict(item) for item in discarded or []],
    }


def _change_view(
    service: BowlService, bowl: BowlConfiguration, result: PortionChangeResult
) -> dict[str, object]:
    if not result.accepted:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.reason)
    return _bowl_view(service, bowl)
