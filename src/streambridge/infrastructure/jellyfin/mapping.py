"""Map Jellyfin BaseItemDto JSON onto domain entities.

Pure transformation logic, no I/O. Upstream records are loosely shaped:
every field is optional and wrongly-typed values are treated as absent.
"""

from __future__ import annotations

from typing import Any

from streambridge.domain.entities.media import (
    MediaItem,
    MediaKind,
    MediaSource,
    MediaStream,
    StreamType,
)

_ITEM_KINDS: dict[str, MediaKind] = {
    "movie": MediaKind.MOVIE,
    "series": MediaKind.SERIES,
    "season": MediaKind.SEASON,
    "episode": MediaKind.EPISODE,
}

_STREAM_TYPES: dict[str, StreamType] = {
    "video": StreamType.VIDEO,
    "audio": StreamType.AUDIO,
    "subtitle": StreamType.SUBTITLE,
}


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _as_str(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _as_bool(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def stream_from_json(data: dict[str, Any]) -> MediaStream:
    raw_type = str(data.get("Type") or "").lower()
    return MediaStream(
        type=_STREAM_TYPES.get(raw_type, StreamType.OTHER),
        index=_as_int(data.get("Index")),
        height=_as_int(data.get("Height")),
        language=_as_str(data.get("Language")),
        display_title=_as_str(data.get("DisplayTitle")),
        is_external=_as_bool(data.get("IsExternal")),
    )


def source_from_json(data: dict[str, Any], item_id: str) -> MediaSource:
    """Build a MediaSource; a missing ``Id`` falls back to *item_id*."""
    streams = data.get("MediaStreams") or []
    return MediaSource(
        id=_as_str(data.get("Id")) or item_id,
        name=_as_str(data.get("Name")),
        streams=tuple(stream_from_json(s) for s in streams if isinstance(s, dict)),
    )


def item_from_json(data: dict[str, Any]) -> MediaItem:
    item_id = str(data["Id"])

    raw_providers = data.get("ProviderIds")
    provider_ids = {
        str(key): str(value)
        for key, value in (raw_providers if isinstance(raw_providers, dict) else {}).items()
        if value not in (None, "")
    }
    genres = tuple(g for g in data.get("Genres") or [] if isinstance(g, str))
    image_tags = data.get("ImageTags") or {}
    sources = data.get("MediaSources") or []

    return MediaItem(
        id=item_id,
        name=_as_str(data.get("Name")) or "",
        kind=_ITEM_KINDS.get(str(data.get("Type") or "").lower(), MediaKind.OTHER),
        overview=_as_str(data.get("Overview")) or "",
        year=_as_int(data.get("ProductionYear")),
        genres=genres,
        provider_ids=provider_ids,
        series_id=_as_str(data.get("SeriesId")),
        index_number=_as_int(data.get("IndexNumber")),
        parent_index_number=_as_int(data.get("ParentIndexNumber")),
        has_primary_image=bool(
            isinstance(image_tags, dict) and image_tags.get("Primary")
        ),
        has_backdrop=bool(data.get("BackdropImageTags")),
        sources=tuple(
            source_from_json(s, item_id) for s in sources if isinstance(s, dict)
        ),
    )


def items_from_json(data: dict[str, Any] | None) -> list[MediaItem]:
    """Items of a ``{"Items": [...]}`` query result, skipping id-less entries."""
    if not data:
        return []
    return [
        item_from_json(raw)
        for raw in data.get("Items") or []
        if isinstance(raw, dict) and raw.get("Id")
    ]
