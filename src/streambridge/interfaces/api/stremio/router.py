"""Stremio addon API endpoints (manifest, catalog, meta, stream)."""

from __future__ import annotations

from typing import Any, cast
from urllib.parse import parse_qsl

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from streambridge.domain.entities.stremio import (
    CatalogEntry,
    EpisodeVideo,
    StreamDescriptor,
    StremioContentType,
)
from streambridge.infrastructure.config import AppConfig
from streambridge.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/stremio", tags=["stremio"])

_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "*",
}

_CONTENT_TYPES: tuple[StremioContentType, ...] = ("movie", "series")
_ID_PREFIXES = ["tt", "tmdb:", "tvdb:", "anidb:", "jellyfin:"]


def _catalog_id(config: AppConfig, content_type: str) -> str:
    return f"{config.addon.id}.{content_type}"


def _build_manifest(config: AppConfig) -> dict[str, Any]:
    """Build the Stremio addon manifest.

    Without a configured Jellyfin server the manifest advertises nothing and
    asks the client for configuration.
    """
    addon = config.addon
    server_name = config.jellyfin.server_name
    manifest: dict[str, Any] = {
        "id": addon.id,
        "version": addon.version,
        "name": addon.name,
        "description": f"Stream movies and series from {server_name}",
        "types": list(_CONTENT_TYPES),
        "catalogs": [],
        "resources": [],
        "idPrefixes": _ID_PREFIXES,
        "behaviorHints": {
            "adult": False,
            "configurable": False,
        },
    }

    if not config.jellyfin.configured:
        manifest["behaviorHints"]["configurationRequired"] = True
        return manifest

    manifest["resources"] = ["catalog", "meta", "stream"]
    manifest["catalogs"] = [
        {
            "type": "movie",
            "id": _catalog_id(config, "movie"),
            "name": f"{server_name} Movies",
            "extra": [
                {"name": "search", "isRequired": False},
                {"name": "skip", "isRequired": False},
            ],
        },
        {
            "type": "series",
            "id": _catalog_id(config, "series"),
            "name": f"{server_name} Series",
            "extra": [
                {"name": "search", "isRequired": False},
                {"name": "skip", "isRequired": False},
            ],
        },
    ]
    return manifest


def _parse_skip(raw: str) -> int:
    try:
        skip = int(raw)
    except ValueError:
        return 0
    return max(skip, 0)


def _parse_extra(extra: str) -> tuple[str, int]:
    """Parse the ``search=...&skip=...`` path segment."""
    params = dict(parse_qsl(extra, keep_blank_values=True))
    return params.get("search", ""), _parse_skip(params.get("skip", "0"))


def _format_video(video: EpisodeVideo) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": video.id,
        "title": video.title,
        "season": video.season,
        "episode": video.episode,
        "overview": video.overview,
    }
    if video.thumbnail:
        data["thumbnail"] = video.thumbnail
    return data


def _format_entry(entry: CatalogEntry) -> dict[str, Any]:
    """Convert a CatalogEntry dataclass to Stremio meta JSON."""
    data: dict[str, Any] = {
        "id": entry.id,
        "type": entry.type,
        "name": entry.name,
        "description": entry.description,
        "genres": list(entry.genres),
    }
    if entry.poster:
        data["poster"] = entry.poster
    if entry.background:
        data["background"] = entry.background
    if entry.year is not None:
        data["releaseInfo"] = str(entry.year)
        data["year"] = entry.year
    if entry.videos is not None:
        data["videos"] = [_format_video(v) for v in entry.videos]
    return data


def _format_stream(stream: StreamDescriptor) -> dict[str, Any]:
    """Convert a StreamDescriptor dataclass to Stremio stream JSON."""
    data: dict[str, Any] = {
        "url": stream.url,
        "title": stream.title,
        "name": stream.name,
        "behaviorHints": {
            "notWebReady": stream.not_web_ready,
            "bingeGroup": stream.binge_group,
        },
    }
    if stream.subtitles:
        data["subtitles"] = [
            {"id": s.id, "url": s.url, "lang": s.lang, "label": s.label}
            for s in stream.subtitles
        ]
    return data


async def _catalog_response(
    request: Request,
    content_type: str,
    catalog_id: str,
    search: str,
    skip: int,
) -> JSONResponse:
    state = cast(AppState, request.app.state)
    catalog_uc = getattr(state, "catalog_uc", None)
    if catalog_uc is None or content_type not in _CONTENT_TYPES:
        return JSONResponse(content={"metas": []}, headers=_CORS_HEADERS)

    entries = await catalog_uc.catalog(
        cast(StremioContentType, content_type), search=search, skip=skip
    )
    log.info(
        "stremio_catalog_response",
        content_type=content_type,
        catalog_id=catalog_id,
        search=search,
        skip=skip,
        metas=len(entries),
    )
    return JSONResponse(
        content={"metas": [_format_entry(e) for e in entries]},
        headers=_CORS_HEADERS,
    )


@router.get("/manifest.json")
async def stremio_manifest(request: Request) -> JSONResponse:
    """Serve the Stremio addon manifest."""
    state = cast(AppState, request.app.state)
    return JSONResponse(content=_build_manifest(state.config), headers=_CORS_HEADERS)


@router.get("/catalog/{content_type}/{catalog_id}.json")
async def stremio_catalog(
    request: Request,
    content_type: str,
    catalog_id: str,
    search: str = "",
    skip: str = "0",
) -> JSONResponse:
    """Serve one page of the Jellyfin library."""
    return await _catalog_response(
        request, content_type, catalog_id, search, _parse_skip(skip)
    )


@router.get("/catalog/{content_type}/{catalog_id}/{extra}.json")
async def stremio_catalog_extra(
    request: Request,
    content_type: str,
    catalog_id: str,
    extra: str,
) -> JSONResponse:
    """Serve a catalog page with Stremio path extras (search, skip)."""
    search, skip = _parse_extra(extra)
    return await _catalog_response(request, content_type, catalog_id, search, skip)


@router.get("/meta/{content_type}/{meta_id}.json")
async def stremio_meta(
    request: Request,
    content_type: str,
    meta_id: str,
) -> JSONResponse:
    """Serve metadata for native ``jellyfin:`` ids."""
    state = cast(AppState, request.app.state)
    catalog_uc = getattr(state, "catalog_uc", None)
    if catalog_uc is None or content_type not in _CONTENT_TYPES:
        return JSONResponse(content={"meta": None}, headers=_CORS_HEADERS)

    entry = await catalog_uc.meta(cast(StremioContentType, content_type), meta_id)
    meta = _format_entry(entry) if entry is not None else None
    return JSONResponse(content={"meta": meta}, headers=_CORS_HEADERS)


@router.get("/stream/{content_type}/{stream_id}.json")
async def stremio_stream(
    request: Request,
    content_type: str,
    stream_id: str,
) -> JSONResponse:
    """Resolve playable streams for a movie or episode.

    1. Classify the id and find verified library matches.
    2. Pick the episode for series requests.
    3. Build one stream per media source.
    """
    state = cast(AppState, request.app.state)
    resolver = getattr(state, "stream_resolver", None)
    if resolver is None:
        return JSONResponse(content={"streams": []}, headers=_CORS_HEADERS)

    result = await resolver.resolve(content_type, stream_id)
    streams = [_format_stream(s) for s in result.items]

    log.info(
        "stremio_stream_response",
        stream_id=stream_id,
        content_type=content_type,
        outcome=result.outcome.value,
        streams_returned=len(streams),
    )
    return JSONResponse(content={"streams": streams}, headers=_CORS_HEADERS)
