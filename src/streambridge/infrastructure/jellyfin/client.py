"""Jellyfin API client, async httpx implementation of MediaCatalogPort."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from streambridge.domain.entities.media import MediaItem, MediaKind
from streambridge.domain.exceptions import CatalogUnavailableError
from streambridge.infrastructure.jellyfin.mapping import item_from_json, items_from_json
from streambridge.infrastructure.jellyfin.urls import JellyfinUrls

log = structlog.get_logger(__name__)

_ITEM_FIELDS = "ProviderIds,MediaSources,Path"
_EPISODE_FIELDS = "MediaSources,Path,ProviderIds"
_LIBRARY_FIELDS = "ProviderIds,Overview,Genres"

_INCLUDE_TYPES: dict[MediaKind, str] = {
    MediaKind.MOVIE: "Movie",
    MediaKind.SERIES: "Series",
    MediaKind.SEASON: "Season",
    MediaKind.EPISODE: "Episode",
}


class HttpxJellyfinClient:
    """Async Jellyfin client using a shared httpx.AsyncClient.

    Implements ``MediaCatalogPort`` from domain.ports.catalog. Every call
    authenticates with the ``api_key`` query parameter. Network errors,
    timeouts and error statuses raise ``CatalogUnavailableError``; a 404 on
    a single-item lookup is reported as ``None``.
    """

    def __init__(
        self,
        *,
        base_url: str,
        user_id: str,
        api_key: str,
        http_client: httpx.AsyncClient,
        search_limit: int = 20,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._user_id = user_id
        self._api_key = api_key
        self._http = http_client
        self._search_limit = search_limit
        self.urls = JellyfinUrls(base_url=self._base_url, api_key=api_key)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @property
    def _user_items_path(self) -> str:
        return f"/Users/{quote(self._user_id, safe='')}/Items"

    async def _get(self, path: str, **params: Any) -> dict[str, Any] | None:
        """GET request returning parsed JSON, or None on 404."""
        url = f"{self._base_url}{path}"
        try:
            resp = await self._http.get(
                url, params={"api_key": self._api_key, **params}
            )
            if resp.status_code == 404:
                log.debug("jellyfin_resource_not_found", path=path)
                return None
            if resp.status_code == 401:
                log.error("jellyfin_api_key_invalid", status=401)
                raise CatalogUnavailableError("Jellyfin rejected the API key")
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as exc:
            log.warning(
                "jellyfin_http_error", path=path, status=exc.response.status_code
            )
            raise CatalogUnavailableError(
                f"Jellyfin answered {exc.response.status_code} for {path}"
            ) from exc
        except httpx.HTTPError as exc:
            log.warning("jellyfin_network_error", path=path, error=repr(exc))
            raise CatalogUnavailableError(f"Jellyfin unreachable ({path})") from exc
        except ValueError as exc:
            log.warning("jellyfin_invalid_json", path=path)
            raise CatalogUnavailableError(f"Invalid JSON from Jellyfin ({path})") from exc

        if not isinstance(data, dict):
            raise CatalogUnavailableError(f"Unexpected payload from Jellyfin ({path})")
        return data

    # ------------------------------------------------------------------
    # Public API (MediaCatalogPort)
    # ------------------------------------------------------------------

    async def search_by_provider_id(
        self,
        scheme: str,
        value: str,
        kind: MediaKind | None = None,
    ) -> list[MediaItem]:
        include_types = _INCLUDE_TYPES.get(kind, "Movie,Series") if kind else "Movie,Series"
        data = await self._get(
            self._user_items_path,
            AnyProviderIdEquals=f"{scheme}.{value}",
            IncludeItemTypes=include_types,
            Fields=_ITEM_FIELDS,
            Recursive=True,
            Limit=self._search_limit,
        )
        items = items_from_json(data)
        log.debug(
            "jellyfin_provider_search",
            scheme=scheme,
            value=value,
            include_types=include_types,
            returned=len(items),
        )
        return items

    async def get_item(self, item_id: str) -> MediaItem | None:
        data = await self._get(
            f"{self._user_items_path}/{quote(item_id, safe='')}",
            Fields=_ITEM_FIELDS,
        )
        if not data or not data.get("Id"):
            return None
        return item_from_json(data)

    async def get_episodes(
        self, series_id: str, season: int | None = None
    ) -> list[MediaItem]:
        params: dict[str, Any] = {
            "UserId": self._user_id,
            "Fields": _EPISODE_FIELDS,
        }
        if season is not None:
            params["SeasonNumber"] = season
        data = await self._get(f"/Shows/{quote(series_id, safe='')}/Episodes", **params)
        return items_from_json(data)

    async def get_seasons(self, series_id: str) -> list[MediaItem]:
        data = await self._get(
            f"/Shows/{quote(series_id, safe='')}/Seasons",
            UserId=self._user_id,
        )
        return items_from_json(data)

    async def get_library(
        self,
        kind: MediaKind,
        search: str = "",
        skip: int = 0,
        limit: int = 50,
    ) -> list[MediaItem]:
        params: dict[str, Any] = {
            "UserId": self._user_id,
            "IncludeItemTypes": _INCLUDE_TYPES.get(kind, "Movie"),
            "Recursive": True,
            "Fields": _LIBRARY_FIELDS,
            "SortBy": "SortName",
            "SortOrder": "Ascending",
            "StartIndex": skip,
            "Limit": limit,
        }
        if search:
            params["SearchTerm"] = search
        data = await self._get(self._user_items_path, **params)
        return items_from_json(data)
