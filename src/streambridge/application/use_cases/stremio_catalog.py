"""Stremio catalog and meta use case, backed by the media-server library."""

from __future__ import annotations

from dataclasses import replace

import structlog

from streambridge.application.use_cases.provider_matcher import external_id_for_item
from streambridge.domain.entities.media import MediaItem, MediaKind
from streambridge.domain.entities.stremio import (
    NATIVE_ID_PREFIX,
    CatalogEntry,
    EpisodeVideo,
    StremioContentType,
)
from streambridge.domain.exceptions import CatalogUnavailableError
from streambridge.domain.ports.catalog import MediaCatalogPort
from streambridge.domain.ports.urls import MediaUrlBuilderPort

log = structlog.get_logger(__name__)

_LIBRARY_KIND: dict[str, MediaKind] = {
    "movie": MediaKind.MOVIE,
    "series": MediaKind.SERIES,
}


def to_catalog_entry(
    item: MediaItem,
    content_type: StremioContentType,
    urls: MediaUrlBuilderPort,
) -> CatalogEntry:
    """Project a library item onto a Stremio MetaPreview."""
    return CatalogEntry(
        id=external_id_for_item(item),
        type=content_type,
        name=item.name,
        poster=urls.image_url(item.id, "Primary") if item.has_primary_image else None,
        background=urls.image_url(item.id, "Backdrop") if item.has_backdrop else None,
        description=item.overview,
        year=item.year,
        genres=item.genres,
    )


class StremioCatalogUseCase:
    """Provides Stremio catalog pages and native-id metas.

    Upstream errors are logged and turned into empty results; the addon
    endpoints always answer with a well-formed envelope.
    """

    def __init__(
        self,
        catalog: MediaCatalogPort,
        urls: MediaUrlBuilderPort,
        *,
        page_size: int = 50,
    ) -> None:
        self._catalog = catalog
        self._urls = urls
        self._page_size = page_size

    async def catalog(
        self,
        content_type: StremioContentType,
        search: str = "",
        skip: int = 0,
    ) -> list[CatalogEntry]:
        """One catalog page of movies or series.

        Args:
            content_type: ``"movie"`` or ``"series"``.
            search: Optional search term (blank = browse).
            skip: Number of items to skip (Stremio pagination).

        Returns:
            Catalog entries sorted by name (empty on error).
        """
        kind = _LIBRARY_KIND.get(content_type)
        if kind is None:
            return []

        try:
            items = await self._catalog.get_library(
                kind,
                search=search.strip(),
                skip=max(skip, 0),
                limit=self._page_size,
            )
        except CatalogUnavailableError:
            log.warning(
                "stremio_catalog_error",
                content_type=content_type,
                search=search,
                skip=skip,
                exc_info=True,
            )
            return []

        return [to_catalog_entry(item, content_type, self._urls) for item in items]

    async def meta(
        self, content_type: StremioContentType, meta_id: str
    ) -> CatalogEntry | None:
        """Full meta for a native ``jellyfin:`` id.

        Other schemes are left to the client's default metadata addon.
        Series metas carry the episode list as ``videos``.
        """
        if not meta_id.startswith(NATIVE_ID_PREFIX):
            return None
        item_id = meta_id[len(NATIVE_ID_PREFIX) :]
        if not item_id:
            return None

        try:
            item = await self._catalog.get_item(item_id)
            if item is None:
                return None
            # Response id must equal the requested id.
            entry = replace(to_catalog_entry(item, content_type, self._urls), id=meta_id)
            if content_type != "series":
                return entry
            videos = await self._series_videos(meta_id, item_id)
        except CatalogUnavailableError:
            log.warning(
                "stremio_meta_error",
                content_type=content_type,
                meta_id=meta_id,
                exc_info=True,
            )
            return None

        return replace(entry, videos=tuple(videos))

    async def _series_videos(self, meta_id: str, series_id: str) -> list[EpisodeVideo]:
        videos: list[EpisodeVideo] = []
        for season in await self._catalog.get_seasons(series_id):
            if season.index_number is None:
                continue
            season_number = season.index_number
            episodes = await self._catalog.get_episodes(series_id, season=season_number)
            for ep in episodes:
                if ep.index_number is None:
                    continue
                videos.append(
                    EpisodeVideo(
                        id=f"{meta_id}:{season_number}:{ep.index_number}",
                        title=ep.name or f"Episode {ep.index_number}",
                        season=season_number,
                        episode=ep.index_number,
                        overview=ep.overview,
                        thumbnail=(
                            self._urls.image_url(ep.id, "Primary")
                            if ep.has_primary_image
                            else None
                        ),
                    )
                )
        return videos
