"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from streambridge.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from streambridge.application.use_cases import (
        IdentifierResolver,
        StremioCatalogUseCase,
    )


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient

    # Application Services (None while Jellyfin is not configured)
    stream_resolver: IdentifierResolver | None
    catalog_uc: StremioCatalogUseCase | None
