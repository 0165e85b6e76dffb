from .lookup import Lookup, LookupOutcome
from .media import (
    MediaItem,
    MediaKind,
    MediaSource,
    MediaStream,
    StreamType,
    lookup_provider_id,
)
from .stremio import (
    CatalogEntry,
    EpisodeVideo,
    ProviderRef,
    ProviderScheme,
    StreamDescriptor,
    StremioContentType,
    StremioStreamRequest,
    SubtitleTrack,
)

__all__ = [
    "CatalogEntry",
    "EpisodeVideo",
    "Lookup",
    "LookupOutcome",
    "MediaItem",
    "MediaKind",
    "MediaSource",
    "MediaStream",
    "ProviderRef",
    "ProviderScheme",
    "StreamDescriptor",
    "StreamType",
    "StremioContentType",
    "StremioStreamRequest",
    "SubtitleTrack",
    "lookup_provider_id",
]
