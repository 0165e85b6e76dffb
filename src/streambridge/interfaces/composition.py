"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from streambridge.application.use_cases import (
    EpisodeLocator,
    IdentifierResolver,
    ProviderIdMatcher,
    StreamAssembler,
    StremioCatalogUseCase,
)
from streambridge.infrastructure.common.retry_transport import RetryTransport
from streambridge.infrastructure.config.schema import AppConfig
from streambridge.infrastructure.jellyfin import HttpxJellyfinClient
from streambridge.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


def _build_http_client(config: AppConfig) -> httpx.AsyncClient:
    transport = RetryTransport(
        wrapped=httpx.AsyncHTTPTransport(),
        max_retries=config.http_retry_max_attempts,
        backoff_base=config.http_retry_backoff_base,
        max_backoff=config.http_retry_max_backoff,
    )
    return httpx.AsyncClient(
        transport=transport,
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )


def _wire_jellyfin(state: AppState, config: AppConfig) -> None:
    """Wire the Jellyfin adapter and the use cases built on it."""
    jellyfin = config.jellyfin
    client = HttpxJellyfinClient(
        base_url=cast(str, jellyfin.url),
        user_id=cast(str, jellyfin.user_id),
        api_key=cast(str, jellyfin.api_key),
        http_client=state.http_client,
        search_limit=jellyfin.search_limit,
    )
    state.stream_resolver = IdentifierResolver(
        matcher=ProviderIdMatcher(client),
        locator=EpisodeLocator(client),
        assembler=StreamAssembler(client.urls, jellyfin.server_name),
    )
    state.catalog_uc = StremioCatalogUseCase(
        client,
        client.urls,
        page_size=config.addon.catalog_page_size,
    )
    log.info(
        "jellyfin_client_initialized",
        url=jellyfin.url,
        server_name=jellyfin.server_name,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP Client (shared by every Jellyfin call)
        2. Jellyfin adapter + use cases (only when Jellyfin is configured)
    """
    state = cast(AppState, app.state)
    config = state.config

    # 1) HTTP client with 429/5xx retry
    state.http_client = _build_http_client(config)
    log.info(
        "http_client_initialized",
        timeout_seconds=config.http_timeout_seconds,
        retry_max_attempts=config.http_retry_max_attempts,
    )

    # 2) Jellyfin (optional; the addon answers with configurationRequired otherwise)
    if config.jellyfin.configured:
        _wire_jellyfin(state, config)
    else:
        state.stream_resolver = None
        state.catalog_uc = None
        log.warning("jellyfin_not_configured")

    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")
