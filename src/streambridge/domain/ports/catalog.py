"""Port for media-server catalog lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from streambridge.domain.entities.media import MediaItem, MediaKind


@runtime_checkable
class MediaCatalogPort(Protocol):
    """Async interface to the upstream media library.

    Implementations raise ``CatalogUnavailableError`` when the server cannot
    be reached, times out or answers with an error status.
    """

    async def search_by_provider_id(
        self,
        scheme: str,
        value: str,
        kind: MediaKind | None = None,
    ) -> list[MediaItem]:
        """Best-effort search for items carrying ``{scheme: value}``.

        May over-return; callers must re-verify each candidate.
        """
        ...

    async def get_item(self, item_id: str) -> MediaItem | None:
        """Fetch one item by its internal id. None if it does not exist."""
        ...

    async def get_episodes(
        self, series_id: str, season: int | None = None
    ) -> list[MediaItem]:
        """List episodes of a series, optionally filtered by season number."""
        ...

    async def get_seasons(self, series_id: str) -> list[MediaItem]:
        """List the seasons of a series."""
        ...

    async def get_library(
        self,
        kind: MediaKind,
        search: str = "",
        skip: int = 0,
        limit: int = 50,
    ) -> list[MediaItem]:
        """Page through movies or series, optionally filtered by a search term."""
        ...
