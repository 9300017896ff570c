"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Query, Request, status

from nutrition_lookup.app_logging import configure_logging
from nutrition_lookup.containers import AppContainer
from nutrition_lookup.domain.geo import GeoPoint


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        repository = state_container.result_cache_repository
        if repository is not None:
            try:
                loaded = state_container.result_cache.load_records(
                    repository.load_records()
                )
                logger.info("Restored %s cached nutrition results", loaded)
            except Exception:
                logger.exception("Failed to restore nutrition result cache")
        yield
        await state_container.restaurant_service.wait_idle()
        if repository is not None:
            try:
                repository.save_records(state_container.result_cache.export_records())
            except Exception:
                logger.exception("Failed to persist nutrition result cache")
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/nutrition")
    async def nutrition(
        request: Request, name: str = Query(..., max_length=200)
    ) -> dict[str, object]:
        """Resolve a menu item name to nutrition ranges."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.nutrition_service.lookup(name)
        return asdict(result)

    @app.get("/restaurants")
    async def restaurants(
        request: Request,
        lat: float = Query(..., ge=-90, le=90),
        lon: float = Query(..., ge=-180, le=180),
    ) -> dict[str, object]:
        """Return restaurants near a location."""
        state_container: AppContainer = request.app.state.container
        service = state_container.restaurant_service
        found = await service.get_restaurants(GeoPoint(latitude=lat, longitude=lon))
        return {
            "restaurants": [asdict(restaurant) for restaurant in found],
            "last_refreshed_at": service.last_refreshed_at,
            "status": service.status(),
        }

    @app.post("/restaurants/preload", status_code=status.HTTP_202_ACCEPTED)
    async def preload_restaurants(
        request: Request,
        lat: float = Query(..., ge=-90, le=90),
        lon: float = Query(..., ge=-180, le=180),
    ) -> dict[str, bool]:
        """Schedule a background fetch for a region."""
        state_container: AppContainer = request.app.state.container
        scheduled = state_container.restaurant_service.preload_region(
            GeoPoint(latitude=lat, longitude=lon)
        )
        if not scheduled:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Preload already running or task limit reached",
            )
        return {"scheduled": True}

    @app.get("/cache/status")
    async def cache_status(request: Request) -> dict[str, object]:
        """Return result cache and geo cache diagnostics."""
        state_container: AppContainer = request.app.state.container
        service = state_container.restaurant_service
        return {
            "result_cache": state_container.result_cache.stats(),
            "geo_cache": {
                "regions": state_container.geo_cache.valid_region_count(),
                "capacity": state_container.geo_cache.capacity,
                "active_tasks": service.active_task_count,
                "last_refreshed_at": service.last_refreshed_at,
            },
        }

    return app
