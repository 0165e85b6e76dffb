"""Tests for ProviderIdMatcher and id classification."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from streambridge.application.use_cases.provider_matcher import (
    ProviderIdMatcher,
    classify,
    external_id_for_item,
    is_verified_match,
)
from streambridge.domain.entities.lookup import LookupOutcome
from streambridge.domain.entities.media import MediaItem, MediaKind
from streambridge.domain.entities.stremio import ProviderRef, ProviderScheme
from streambridge.domain.exceptions import CatalogUnavailableError

# ---------------------------------------------------------------------------
# classify
# ---------------------------------------------------------------------------


class TestClassify:
    def test_imdb_keeps_full_id(self) -> None:
        assert classify("tt0903747") == ProviderRef(ProviderScheme.IMDB, "tt0903747")

    @pytest.mark.parametrize(
        ("raw", "scheme", "value"),
        [
            ("tmdb:1396", ProviderScheme.TMDB, "1396"),
            ("tvdb:81189", ProviderScheme.TVDB, "81189"),
            ("anidb:23", ProviderScheme.ANIDB, "23"),
            ("jellyfin:abc123", ProviderScheme.NATIVE, "abc123"),
        ],
    )
    def test_prefixed_schemes(
        self, raw: str, scheme: ProviderScheme, value: str
    ) -> None:
        assert classify(raw) == ProviderRef(scheme, value)

    def test_unknown(self) -> None:
        assert classify("kitsu:1").scheme is ProviderScheme.UNKNOWN


# ---------------------------------------------------------------------------
# Verification and reverse mapping
# ---------------------------------------------------------------------------


class TestIsVerifiedMatch:
    def test_case_insensitive_key_and_value(self) -> None:
        item = MediaItem(id="1", provider_ids={"IMDB": "TT0903747"})
        ref = ProviderRef(ProviderScheme.IMDB, "tt0903747")
        assert is_verified_match(item, ref) is True

    def test_different_value_rejected(self) -> None:
        item = MediaItem(id="1", provider_ids={"Imdb": "tt0000001"})
        ref = ProviderRef(ProviderScheme.IMDB, "tt0903747")
        assert is_verified_match(item, ref) is False

    def test_missing_key_rejected(self) -> None:
        item = MediaItem(id="1", provider_ids={"Tmdb": "1396"})
        ref = ProviderRef(ProviderScheme.IMDB, "tt0903747")
        assert is_verified_match(item, ref) is False


class TestExternalIdForItem:
    def test_prefers_imdb(self) -> None:
        item = MediaItem(id="1", provider_ids={"Tmdb": "5", "imdb": "tt9"})
        assert external_id_for_item(item) == "tt9"

    def test_tmdb_then_tvdb(self) -> None:
        assert external_id_for_item(MediaItem(id="1", provider_ids={"Tmdb": "5"})) == "tmdb:5"
        assert external_id_for_item(MediaItem(id="1", provider_ids={"Tvdb": "7"})) == "tvdb:7"

    def test_native_fallback(self) -> None:
        assert external_id_for_item(MediaItem(id="abc")) == "jellyfin:abc"


# ---------------------------------------------------------------------------
# ProviderIdMatcher.match
# ---------------------------------------------------------------------------


class TestProviderIdMatcher:
    async def test_verified_candidates_keep_upstream_order(
        self, catalog: AsyncMock
    ) -> None:
        first = MediaItem(id="a", provider_ids={"Imdb": "tt0903747"})
        stray = MediaItem(id="b", provider_ids={"Imdb": "tt1111111"})
        second = MediaItem(id="c", provider_ids={"imdb": "tt0903747"})
        catalog.search_by_provider_id.return_value = [first, stray, second]

        result = await ProviderIdMatcher(catalog).match("tt0903747", "series")

        assert result.outcome is LookupOutcome.FOUND
        assert [i.id for i in result.items] == ["a", "c"]
        catalog.search_by_provider_id.assert_awaited_once_with(
            "Imdb", "tt0903747", MediaKind.SERIES
        )

    async def test_no_kind_filter_without_content_type(
        self, catalog: AsyncMock
    ) -> None:
        await ProviderIdMatcher(catalog).match("tmdb:27205")
        catalog.search_by_provider_id.assert_awaited_once_with("Tmdb", "27205", None)

    async def test_all_candidates_rejected_is_not_found(
        self, catalog: AsyncMock
    ) -> None:
        catalog.search_by_provider_id.return_value = [
            MediaItem(id="x", provider_ids={"Imdb": "tt1"})
        ]
        result = await ProviderIdMatcher(catalog).match("tt2", "movie")
        assert result.outcome is LookupOutcome.NOT_FOUND
        assert result.items == ()

    async def test_upstream_error(self, catalog: AsyncMock) -> None:
        catalog.search_by_provider_id.side_effect = CatalogUnavailableError("down")
        result = await ProviderIdMatcher(catalog).match("tt1", "movie")
        assert result.outcome is LookupOutcome.UPSTREAM_ERROR

    async def test_unknown_scheme_not_attempted(self, catalog: AsyncMock) -> None:
        result = await ProviderIdMatcher(catalog).match("kitsu:1", "series")
        assert result.outcome is LookupOutcome.NOT_ATTEMPTED
        catalog.search_by_provider_id.assert_not_awaited()

    async def test_empty_prefixed_value_not_attempted(
        self, catalog: AsyncMock
    ) -> None:
        result = await ProviderIdMatcher(catalog).match("tmdb:", "movie")
        assert result.outcome is LookupOutcome.NOT_ATTEMPTED

    async def test_native_id_fetches_item(self, catalog: AsyncMock) -> None:
        item = MediaItem(id="abc", kind=MediaKind.MOVIE)
        catalog.get_item.return_value = item

        result = await ProviderIdMatcher(catalog).match("jellyfin:abc", "movie")

        assert result.items == (item,)
        catalog.get_item.assert_awaited_once_with("abc")
        catalog.search_by_provider_id.assert_not_awaited()

    async def test_native_id_missing(self, catalog: AsyncMock) -> None:
        result = await ProviderIdMatcher(catalog).match("jellyfin:gone", "movie")
        assert result.outcome is LookupOutcome.NOT_FOUND

    async def test_native_id_upstream_error(self, catalog: AsyncMock) -> None:
        catalog.get_item.side_effect = CatalogUnavailableError("down")
        result = await ProviderIdMatcher(catalog).match("jellyfin:abc", "movie")
        assert result.outcome is LookupOutcome.UPSTREAM_ERROR
