"""Build Stremio stream descriptors from one resolved playable item."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from streambridge.domain.entities.media import (
    MediaItem,
    MediaSource,
    StreamType,
)
from streambridge.domain.entities.stremio import (
    BINGE_GROUP_PREFIX,
    StreamDescriptor,
    SubtitleTrack,
)
from streambridge.domain.ports.urls import MediaUrlBuilderPort

log = structlog.get_logger(__name__)

# (minimum height, label), checked top-down.
_RESOLUTION_BUCKETS: tuple[tuple[int, str], ...] = (
    (2160, "4K"),
    (1080, "1080p"),
    (720, "720p"),
)

_LABEL_SEPARATOR = " – "
_UNDEFINED_LANGUAGE = "und"
_SUBTITLE_PLACEHOLDER = "Subtitle"


def resolution_label(height: object) -> str | None:
    """Map a video height to a resolution bucket.

    Returns None for a missing, zero or non-numeric height.
    """
    if not isinstance(height, int) or isinstance(height, bool) or height <= 0:
        return None
    for minimum, label in _RESOLUTION_BUCKETS:
        if height >= minimum:
            return label
    return f"{height}p"


def quality_label(item: MediaItem, source: MediaSource) -> str:
    """Resolution label plus the source name when it adds information."""
    video = source.first_stream(StreamType.VIDEO)
    label = resolution_label(video.height) if video else None

    if source.name and source.name != item.name:
        return f"{label}{_LABEL_SEPARATOR}{source.name}" if label else source.name
    return label or ""


def extract_subtitles(
    sources: Sequence[MediaSource],
    urls: MediaUrlBuilderPort,
    fallback_handle: str = "",
) -> tuple[SubtitleTrack, ...]:
    """Subtitle tracks of the first source in *sources*.

    A track is kept unless it is explicitly flagged as embedded
    (``is_external is False``). Tracks without an index cannot be addressed
    and are dropped.
    """
    if not sources:
        return ()
    source = sources[0]
    handle = source.id or fallback_handle

    tracks: list[SubtitleTrack] = []
    for stream in source.streams:
        if stream.type is not StreamType.SUBTITLE or stream.is_external is False:
            continue
        if stream.index is None:
            continue
        lang = stream.language or _UNDEFINED_LANGUAGE
        tracks.append(
            SubtitleTrack(
                id=str(stream.index),
                url=urls.subtitle_url(handle, stream.index),
                lang=lang,
                label=stream.display_title or stream.language or _SUBTITLE_PLACEHOLDER,
            )
        )
    return tuple(tracks)


class StreamAssembler:
    """Turns an item and its media sources into ordered stream descriptors."""

    def __init__(self, urls: MediaUrlBuilderPort, server_name: str) -> None:
        self._urls = urls
        self._server_name = server_name

    def assemble(
        self,
        item: MediaItem,
        sources: Sequence[MediaSource] | None = None,
    ) -> list[StreamDescriptor]:
        """One descriptor per source (source order), or one for the item itself.

        A source that fails to build is logged and skipped.
        """
        if sources is None:
            sources = item.sources

        if not sources:
            return [self._build(item, item.id, None)]

        descriptors: list[StreamDescriptor] = []
        for position, source in enumerate(sources):
            try:
                descriptors.append(self._build(item, source.id or item.id, source))
            except Exception:
                log.warning(
                    "stream_source_skipped",
                    item_id=item.id,
                    source_id=source.id,
                    position=position,
                    exc_info=True,
                )
        return descriptors

    def _build(
        self,
        item: MediaItem,
        handle: str,
        source: MediaSource | None,
    ) -> StreamDescriptor:
        label = quality_label(item, source) if source is not None else ""
        title = f"{self._server_name}\n{label}" if label else self._server_name
        subtitles = (
            extract_subtitles([source], self._urls, fallback_handle=handle)
            if source is not None
            else ()
        )
        return StreamDescriptor(
            url=self._urls.playback_url(handle),
            title=title,
            name=self._server_name,
            binge_group=f"{BINGE_GROUP_PREFIX}-{item.series_id or item.id}",
            subtitles=subtitles,
            not_web_ready=True,
        )
