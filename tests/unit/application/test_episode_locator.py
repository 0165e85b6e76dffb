"""Tests for the two-phase EpisodeLocator."""

from __future__ import annotations

from unittest.mock import AsyncMock, call

from streambridge.application.use_cases.episode_locator import EpisodeLocator
from streambridge.domain.entities.lookup import LookupOutcome
from streambridge.domain.entities.media import MediaItem, MediaKind
from streambridge.domain.exceptions import CatalogUnavailableError


def _episode(item_id: str, season: int | None, episode: int | None) -> MediaItem:
    return MediaItem(
        id=item_id,
        kind=MediaKind.EPISODE,
        series_id="s1",
        parent_index_number=season,
        index_number=episode,
    )


class TestSeasonFilteredPhase:
    async def test_found_in_first_phase(self, catalog: AsyncMock) -> None:
        catalog.get_episodes.return_value = [
            _episode("e1", 2, 1),
            _episode("e2", 2, 2),
        ]

        result = await EpisodeLocator(catalog).locate("s1", 2, 2)

        assert result.outcome is LookupOutcome.FOUND
        assert result.first is not None
        assert result.first.id == "e2"
        catalog.get_episodes.assert_awaited_once_with("s1", season=2)

    async def test_first_match_wins(self, catalog: AsyncMock) -> None:
        catalog.get_episodes.return_value = [
            _episode("a", 1, 3),
            _episode("b", 1, 3),
        ]
        result = await EpisodeLocator(catalog).locate("s1", 1, 3)
        assert [e.id for e in result.items] == ["a"]


class TestFullScanFallback:
    async def test_ignored_season_filter_falls_back(
        self, catalog: AsyncMock
    ) -> None:
        # Server ignores SeasonNumber: first phase sees season 1 only.
        season_one = [_episode("s1e1", 1, 1), _episode("s1e2", 1, 2)]
        everything = season_one + [_episode("s3e5", 3, 5)]
        catalog.get_episodes.side_effect = [season_one, everything]

        result = await EpisodeLocator(catalog).locate("s1", 3, 5)

        assert result.first is not None
        assert result.first.id == "s3e5"
        assert catalog.get_episodes.await_args_list == [
            call("s1", season=3),
            call("s1"),
        ]

    async def test_unfiltered_season_query_skips_other_seasons(
        self, catalog: AsyncMock
    ) -> None:
        # Server returns every season for every SeasonNumber.
        everything = [_episode("s1e1", 1, 1), _episode("s2e1", 2, 1)]
        catalog.get_episodes.return_value = everything

        result = await EpisodeLocator(catalog).locate("s1", 2, 1)

        assert result.first is not None
        assert result.first.id == "s2e1"

    async def test_season_query_keeps_entries_without_season_number(
        self, catalog: AsyncMock
    ) -> None:
        catalog.get_episodes.return_value = [_episode("e", None, 4)]
        result = await EpisodeLocator(catalog).locate("s1", 2, 4)
        assert result.first is not None
        assert result.first.id == "e"
        catalog.get_episodes.assert_awaited_once_with("s1", season=2)

    async def test_index_match_in_wrong_season_not_accepted_by_scan(
        self, catalog: AsyncMock
    ) -> None:
        catalog.get_episodes.side_effect = [[], [_episode("x", 1, 5)]]
        result = await EpisodeLocator(catalog).locate("s1", 3, 5)
        assert result.outcome is LookupOutcome.NOT_FOUND

    async def test_first_phase_error_still_scans(self, catalog: AsyncMock) -> None:
        catalog.get_episodes.side_effect = [
            CatalogUnavailableError("boom"),
            [_episode("e", 2, 4)],
        ]
        result = await EpisodeLocator(catalog).locate("s1", 2, 4)
        assert result.first is not None
        assert result.first.id == "e"

    async def test_scan_error_reported(self, catalog: AsyncMock) -> None:
        catalog.get_episodes.side_effect = [[], CatalogUnavailableError("boom")]
        result = await EpisodeLocator(catalog).locate("s1", 2, 4)
        assert result.outcome is LookupOutcome.UPSTREAM_ERROR

    async def test_episodes_without_numbers_never_match(
        self, catalog: AsyncMock
    ) -> None:
        catalog.get_episodes.side_effect = [
            [_episode("n", None, None)],
            [_episode("n", None, None)],
        ]
        result = await EpisodeLocator(catalog).locate("s1", 1, 1)
        assert result.outcome is LookupOutcome.NOT_FOUND
