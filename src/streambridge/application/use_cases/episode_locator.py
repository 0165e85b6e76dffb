"""Find one episode of a series by (season, episode)."""

from __future__ import annotations

import structlog

from streambridge.domain.entities.lookup import Lookup
from streambridge.domain.entities.media import MediaItem
from streambridge.domain.exceptions import CatalogUnavailableError
from streambridge.domain.ports.catalog import MediaCatalogPort

log = structlog.get_logger(__name__)


class EpisodeLocator:
    """Two-phase episode lookup.

    Phase one asks the server for the season's episodes and matches the
    episode index. Server-side season filtering is not reliable on every
    deployment, so a miss falls through to phase two: list every episode
    of the series and match season and episode client-side.
    """

    def __init__(self, catalog: MediaCatalogPort) -> None:
        self._catalog = catalog

    async def locate(
        self, series_id: str, season: int, episode: int
    ) -> Lookup[MediaItem]:
        first = await self._season_filtered_phase(series_id, season, episode)
        if first.ok:
            return first

        log.info(
            "episode_fallback_scan",
            series_id=series_id,
            season=season,
            episode=episode,
            first_phase=first.outcome.value,
        )
        second = await self._full_scan_phase(series_id, season, episode)
        if not second.ok:
            log.info(
                "episode_not_found",
                series_id=series_id,
                season=season,
                episode=episode,
                outcome=second.outcome.value,
            )
        return second

    async def _season_filtered_phase(
        self, series_id: str, season: int, episode: int
    ) -> Lookup[MediaItem]:
        try:
            episodes = await self._catalog.get_episodes(series_id, season=season)
        except CatalogUnavailableError:
            log.warning(
                "episode_season_query_failed",
                series_id=series_id,
                season=season,
                exc_info=True,
            )
            return Lookup.failed()

        log.debug(
            "episode_season_query",
            series_id=series_id,
            season=season,
            returned=len(episodes),
            indices=[e.index_number for e in episodes],
        )
        # Entries without a season number are trusted to belong to the filter.
        matches = [
            e
            for e in episodes
            if e.index_number == episode
            and e.parent_index_number in (None, season)
        ]
        return Lookup.found(matches[:1])

    async def _full_scan_phase(
        self, series_id: str, season: int, episode: int
    ) -> Lookup[MediaItem]:
        try:
            episodes = await self._catalog.get_episodes(series_id)
        except CatalogUnavailableError:
            log.warning("episode_full_scan_failed", series_id=series_id, exc_info=True)
            return Lookup.failed()

        matches = [
            e
            for e in episodes
            if e.parent_index_number == season and e.index_number == episode
        ]
        return Lookup.found(matches[:1])
