"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from flixscrape.infrastructure.config import AppConfig
from flixscrape.interfaces.app_state import AppState
from flixscrape.interfaces.composition import lifespan

log = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"

# Routers are mounted under API_PREFIX and again at the root.
_MOUNT_PREFIXES = (API_PREFIX, "")


def _add_health_routes(app: FastAPI) -> None:
    async def healthz() -> dict[str, str | bool | int]:
        """Liveness probe plus a glance at enrichment and cache state."""
        enricher = getattr(app.state, "listing_enricher", None)
        cache = getattr(app.state, "cache", None)
        return {
            "status": "ok",
            "enrichment": bool(enricher and enricher.active),
            "cacheEntries": await cache.size() if cache else 0,
        }

    for prefix in _MOUNT_PREFIXES:
        app.add_api_route(f"{prefix}/healthz", healthz, methods=["GET"])


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app - configuration ONLY, NO resource initialization.

    Resources (HTTP client, cache, use cases) are created in lifespan().
    """
    app = FastAPI(
        title="flixscrape",
        description="Scraping proxy for a FlixHQ-style streaming site",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from flixscrape.interfaces.api.catalog.router import router as catalog_router
    from flixscrape.interfaces.api.movie.router import router as movie_router

    for prefix in _MOUNT_PREFIXES:
        app.include_router(catalog_router, prefix=prefix)
        app.include_router(movie_router, prefix=prefix)
    _add_health_routes(app)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
                client_host=request.client.host if request.client else None,
            )

    return app
