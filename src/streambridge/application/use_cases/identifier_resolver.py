"""Stremio stream resolution use case.

Stremio id -> (base id, season, episode) -> provider-id match
-> (series) episode lookup -> stream descriptors.
"""

from __future__ import annotations

import re
from typing import cast

import structlog

from streambridge.application.use_cases.episode_locator import EpisodeLocator
from streambridge.application.use_cases.provider_matcher import ProviderIdMatcher
from streambridge.application.use_cases.stream_assembler import StreamAssembler
from streambridge.domain.entities.lookup import Lookup
from streambridge.domain.entities.media import MediaItem, MediaKind
from streambridge.domain.entities.stremio import (
    StreamDescriptor,
    StremioContentType,
    StremioStreamRequest,
)

log = structlog.get_logger(__name__)

_INDEX_RE = re.compile(r"\d+", re.ASCII)


def parse_stream_id(content_type: str, raw_id: str) -> StremioStreamRequest | None:
    """Parse a Stremio stream id into a StremioStreamRequest.

    Movies: the id is used as-is (``tt1234567``, ``tmdb:12345``).
    Series: ``<base>:<season>:<episode>`` where the base may itself contain
    colons (``tmdb:12345:1:2`` -> ``tmdb:12345``, S1, E2). When the last two
    segments are not both non-negative integers the whole string is the
    base id and no season/episode is set.

    Returns None only for an unsupported content type.
    """
    if content_type not in ("movie", "series"):
        return None
    ct = cast(StremioContentType, content_type)

    if ct == "series":
        parts = raw_id.split(":")
        if (
            len(parts) >= 3
            and _INDEX_RE.fullmatch(parts[-2])
            and _INDEX_RE.fullmatch(parts[-1])
        ):
            return StremioStreamRequest(
                base_id=":".join(parts[:-2]),
                content_type=ct,
                season=int(parts[-2]),
                episode=int(parts[-1]),
            )

    return StremioStreamRequest(base_id=raw_id, content_type=ct)


def _first_episode(items: tuple[MediaItem, ...]) -> MediaItem | None:
    for item in items:
        if item.kind is MediaKind.EPISODE:
            return item
    return None


class IdentifierResolver:
    """Resolves a Stremio (type, id) pair to stream descriptors.

    Never raises: every failure ends as an empty ``Lookup`` whose outcome
    says why. ``found`` always carries at least one descriptor.
    """

    def __init__(
        self,
        *,
        matcher: ProviderIdMatcher,
        locator: EpisodeLocator,
        assembler: StreamAssembler,
    ) -> None:
        self._matcher = matcher
        self._locator = locator
        self._assembler = assembler

    async def resolve(
        self, content_type: str, external_id: str
    ) -> Lookup[StreamDescriptor]:
        request = parse_stream_id(content_type, external_id)
        if request is None:
            log.info(
                "stream_unsupported_type",
                content_type=content_type,
                stream_id=external_id,
            )
            return Lookup.skipped()

        log.info(
            "stream_request",
            stream_id=external_id,
            base_id=request.base_id,
            content_type=request.content_type,
            season=request.season,
            episode=request.episode,
        )

        try:
            return await self._resolve(request)
        except Exception:
            log.warning(
                "stream_resolution_failed",
                stream_id=external_id,
                content_type=content_type,
                exc_info=True,
            )
            return Lookup.failed()

    async def _resolve(
        self, request: StremioStreamRequest
    ) -> Lookup[StreamDescriptor]:
        candidates = await self._matcher.match(request.base_id, request.content_type)
        if not candidates.ok:
            log.info(
                "stream_no_items",
                base_id=request.base_id,
                outcome=candidates.outcome.value,
            )
            return Lookup(candidates.outcome)

        target = await self._select_playable(request, candidates)
        item = target.first
        if item is None:
            return Lookup(target.outcome)

        streams = self._assembler.assemble(item, item.sources)
        log.info(
            "stream_resolved",
            base_id=request.base_id,
            item_id=item.id,
            item_name=item.name,
            sources=len(item.sources),
            streams=len(streams),
        )
        return Lookup.found(streams)

    async def _select_playable(
        self,
        request: StremioStreamRequest,
        candidates: Lookup[MediaItem],
    ) -> Lookup[MediaItem]:
        """Pick the item to play.

        Movies: the canonical (first) candidate. Series: an episode needs
        season and episode; a candidate that is already an episode is
        preferred, otherwise the canonical series goes through the
        EpisodeLocator.
        """
        if request.content_type == "movie":
            return Lookup.found(candidates.items[:1])

        if request.season is None or request.episode is None:
            log.info("stream_series_without_episode", base_id=request.base_id)
            return Lookup.skipped()

        episode = _first_episode(candidates.items)
        if episode is not None:
            return Lookup.found([episode])

        series = candidates.items[0]
        return await self._locator.locate(series.id, request.season, request.episode)
