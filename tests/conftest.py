"""Shared test fixtures for StreamBridge test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from streambridge.domain.entities.media import (
    MediaItem,
    MediaKind,
    MediaSource,
    MediaStream,
    StreamType,
)
from streambridge.infrastructure.jellyfin.urls import JellyfinUrls

JELLYFIN_URL = "http://jf.local:8096"
API_KEY = "test-key"

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def movie_source() -> MediaSource:
    """A 1080p source with one external and one embedded subtitle."""
    return MediaSource(
        id="src-1",
        name="Inception",
        streams=(
            MediaStream(type=StreamType.VIDEO, index=0, height=1080),
            MediaStream(type=StreamType.AUDIO, index=1, language="eng"),
            MediaStream(
                type=StreamType.SUBTITLE,
                index=2,
                language="eng",
                display_title="English",
                is_external=True,
            ),
            MediaStream(
                type=StreamType.SUBTITLE,
                index=3,
                language="ger",
                is_external=False,
            ),
        ),
    )


@pytest.fixture()
def movie_item(movie_source: MediaSource) -> MediaItem:
    return MediaItem(
        id="m1",
        name="Inception",
        kind=MediaKind.MOVIE,
        overview="A thief who steals corporate secrets.",
        year=2010,
        genres=("Action", "Sci-Fi"),
        provider_ids={"Imdb": "tt1375666", "Tmdb": "27205"},
        has_primary_image=True,
        has_backdrop=True,
        sources=(movie_source,),
    )


@pytest.fixture()
def series_item() -> MediaItem:
    return MediaItem(
        id="s1",
        name="Breaking Bad",
        kind=MediaKind.SERIES,
        year=2008,
        provider_ids={"Imdb": "tt0903747", "Tvdb": "81189"},
        has_primary_image=True,
    )


@pytest.fixture()
def episode_item() -> MediaItem:
    return MediaItem(
        id="e1",
        name="Pilot",
        kind=MediaKind.EPISODE,
        series_id="s1",
        index_number=1,
        parent_index_number=1,
        sources=(
            MediaSource(
                id="e1",
                name="Pilot",
                streams=(MediaStream(type=StreamType.VIDEO, index=0, height=720),),
            ),
        ),
    )


# ---------------------------------------------------------------------------
# Port fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def urls() -> JellyfinUrls:
    return JellyfinUrls(base_url=JELLYFIN_URL, api_key=API_KEY)


@pytest.fixture()
def catalog() -> AsyncMock:
    """MediaCatalogPort mock; every query returns nothing by default."""
    mock = AsyncMock()
    mock.search_by_provider_id.return_value = []
    mock.get_item.return_value = None
    mock.get_episodes.return_value = []
    mock.get_seasons.return_value = []
    mock.get_library.return_value = []
    return mock
