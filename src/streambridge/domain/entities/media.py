"""Domain entities for the media-server item graph.

Pure value objects, no framework dependencies, no I/O. Instances are rebuilt
from the upstream catalog on every request and never persisted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class MediaKind(str, Enum):
    """Kind of a catalog item."""

    MOVIE = "movie"
    SERIES = "series"
    SEASON = "season"
    EPISODE = "episode"
    OTHER = "other"


class StreamType(str, Enum):
    """Type tag of an elementary track inside a media source."""

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"
    OTHER = "other"


def lookup_provider_id(provider_ids: Mapping[str, str], scheme: str) -> str | None:
    """Return the provider value stored under *scheme*, ignoring key casing.

    Upstream records spell the same key differently (``Imdb``, ``IMDB``,
    ``imdb``). The first key that matches case-insensitively wins.
    Empty values count as absent.
    """
    wanted = scheme.casefold()
    for key, value in provider_ids.items():
        if key.casefold() == wanted and value:
            return str(value)
    return None


@dataclass(frozen=True)
class MediaStream:
    """One elementary track (video/audio/subtitle) within a media source."""

    type: StreamType
    index: int | None = None
    height: int | None = None
    language: str | None = None
    display_title: str | None = None
    # None = upstream did not say; only an explicit False marks an
    # embedded track that cannot be served as a standalone file.
    is_external: bool | None = None


@dataclass(frozen=True)
class MediaSource:
    """One encoded variant of an item's playable content."""

    id: str | None = None
    name: str | None = None
    streams: tuple[MediaStream, ...] = ()

    def first_stream(self, stream_type: StreamType) -> MediaStream | None:
        for stream in self.streams:
            if stream.type is stream_type:
                return stream
        return None


@dataclass(frozen=True)
class MediaItem:
    """A movie, series, season or episode from the upstream catalog."""

    id: str
    name: str = ""
    kind: MediaKind = MediaKind.OTHER
    overview: str = ""
    year: int | None = None
    genres: tuple[str, ...] = ()
    provider_ids: Mapping[str, str] = field(default_factory=dict)
    series_id: str | None = None
    index_number: int | None = None  # episode number (or season number)
    parent_index_number: int | None = None  # season number of an episode
    has_primary_image: bool = False
    has_backdrop: bool = False
    sources: tuple[MediaSource, ...] = ()

    def provider_id(self, scheme: str) -> str | None:
        """Case-insensitive lookup into the provider-id map."""
        return lookup_provider_id(self.provider_ids, scheme)
