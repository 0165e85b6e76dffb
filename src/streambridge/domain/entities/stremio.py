"""Domain entities for the Stremio addon protocol.

Pure value objects, no framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

StremioContentType = Literal["movie", "series"]

NATIVE_ID_PREFIX = "jellyfin:"
BINGE_GROUP_PREFIX = "jellyfin"


class ProviderScheme(str, Enum):
    """External naming schemes. Values are the upstream provider-id keys."""

    IMDB = "Imdb"
    TMDB = "Tmdb"
    TVDB = "Tvdb"
    ANIDB = "AniDb"
    NATIVE = "Jellyfin"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class ProviderRef:
    """A classified external identifier: scheme plus scheme-specific value."""

    scheme: ProviderScheme
    value: str


@dataclass(frozen=True)
class StremioStreamRequest:
    """Parsed Stremio stream request.

    Created from URL path: ``tt1234567`` (movie) or
    ``tmdb:1396:1:5`` (series, season 1, episode 5).
    """

    base_id: str
    content_type: StremioContentType
    season: int | None = None
    episode: int | None = None

    @property
    def has_episode(self) -> bool:
        return self.season is not None and self.episode is not None


@dataclass(frozen=True)
class SubtitleTrack:
    """Stremio Subtitles object."""

    id: str
    url: str
    lang: str
    label: str


@dataclass(frozen=True)
class StreamDescriptor:
    """Stremio Stream object for one playable media source."""

    url: str
    title: str  # "<server>\n<quality label>" or just "<server>"
    name: str  # server name
    binge_group: str  # groups alternate sources of one series/movie
    subtitles: tuple[SubtitleTrack, ...] = ()
    # Tells the client to use its own streaming path instead of treating
    # the URL as a raw file link.
    not_web_ready: bool = True


@dataclass(frozen=True)
class EpisodeVideo:
    """Stremio Video object (one episode inside a series meta)."""

    id: str  # "<meta id>:<season>:<episode>"
    title: str
    season: int
    episode: int
    overview: str = ""
    thumbnail: str | None = None


@dataclass(frozen=True)
class CatalogEntry:
    """Stremio catalog item (MetaPreview) or full Meta when videos are set."""

    id: str
    type: StremioContentType
    name: str
    poster: str | None = None
    background: str | None = None
    description: str = ""
    year: int | None = None
    genres: tuple[str, ...] = ()
    videos: tuple[EpisodeVideo, ...] | None = field(default=None)
