"""FastAPI application factory (create_app)."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from streambridge import __version__
from streambridge.infrastructure.config import AppConfig
from streambridge.interfaces.app_state import AppState
from streambridge.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def create_app(config: AppConfig) -> FastAPI:
    """Create FastAPI app, configuration ONLY, NO resource initialization.

    Resources (HTTP client, Jellyfin adapter) are created in lifespan().
    """
    app = FastAPI(
        title="StreamBridge",
        description="Stremio addon serving a Jellyfin library",
        version=__version__,
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    from streambridge.interfaces.api.stremio.router import router as stremio_router

    app.include_router(stremio_router, prefix="/api/v1")

    @app.get("/api/v1/healthz")
    async def healthz() -> dict[str, str | bool]:
        """Liveness probe, returns 200 as long as the process is running."""
        return {
            "status": "ok",
            "jellyfin_configured": config.jellyfin.configured,
        }

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = getattr(locals().get("response", None), "status_code", 500)

            # Query strings are not logged.
            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
