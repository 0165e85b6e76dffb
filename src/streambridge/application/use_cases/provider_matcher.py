"""Provider-ID matching between Stremio ids and media-server items.

Stremio id -> (scheme, value) -> upstream search -> local re-verification.
The reverse direction (item -> Stremio id) lives here too so both mappings
stay in one place.
"""

from __future__ import annotations

import structlog

from streambridge.domain.entities.lookup import Lookup
from streambridge.domain.entities.media import MediaItem, MediaKind
from streambridge.domain.entities.stremio import (
    NATIVE_ID_PREFIX,
    ProviderRef,
    ProviderScheme,
    StremioContentType,
)
from streambridge.domain.exceptions import CatalogUnavailableError
from streambridge.domain.ports.catalog import MediaCatalogPort

log = structlog.get_logger(__name__)

_IMDB_PREFIX = "tt"

# Checked in order after the IMDb prefix.
_PREFIXED_SCHEMES: tuple[tuple[str, ProviderScheme], ...] = (
    ("tmdb:", ProviderScheme.TMDB),
    ("tvdb:", ProviderScheme.TVDB),
    ("anidb:", ProviderScheme.ANIDB),
    (NATIVE_ID_PREFIX, ProviderScheme.NATIVE),
)

_KIND_FILTER: dict[str, MediaKind] = {
    "movie": MediaKind.MOVIE,
    "series": MediaKind.SERIES,
}


def classify(base_id: str) -> ProviderRef:
    """Classify a base Stremio id (season/episode already stripped).

    ``tt0903747`` keeps the full string as the IMDb value; prefixed ids
    (``tmdb:1396``) yield the part after the prefix. Anything else is
    ``ProviderScheme.UNKNOWN``.
    """
    if base_id.startswith(_IMDB_PREFIX):
        return ProviderRef(ProviderScheme.IMDB, base_id)
    for prefix, scheme in _PREFIXED_SCHEMES:
        if base_id.startswith(prefix):
            return ProviderRef(scheme, base_id[len(prefix) :])
    return ProviderRef(ProviderScheme.UNKNOWN, base_id)


def is_verified_match(item: MediaItem, ref: ProviderRef) -> bool:
    """True when *item* really carries ``ref`` in its provider-id map.

    Key and value are both compared case-insensitively.
    """
    value = item.provider_id(ref.scheme.value)
    return value is not None and value.casefold() == ref.value.casefold()


def external_id_for_item(item: MediaItem) -> str:
    """Stremio id for an item: IMDb, then TMDb, then TVDb, then native."""
    imdb = item.provider_id(ProviderScheme.IMDB.value)
    if imdb:
        return imdb
    tmdb = item.provider_id(ProviderScheme.TMDB.value)
    if tmdb:
        return f"tmdb:{tmdb}"
    tvdb = item.provider_id(ProviderScheme.TVDB.value)
    if tvdb:
        return f"tvdb:{tvdb}"
    return f"{NATIVE_ID_PREFIX}{item.id}"


class ProviderIdMatcher:
    """Resolves a base Stremio id to verified catalog items.

    Upstream provider-id search is looser than exact equality on some
    servers, so every candidate is re-checked with ``is_verified_match``.
    Verified candidates keep upstream order; the first is canonical.
    """

    def __init__(self, catalog: MediaCatalogPort) -> None:
        self._catalog = catalog

    async def match(
        self,
        base_id: str,
        content_type: StremioContentType | None = None,
    ) -> Lookup[MediaItem]:
        ref = classify(base_id)
        if ref.scheme is ProviderScheme.UNKNOWN or not ref.value:
            log.info("provider_id_unrecognized", base_id=base_id)
            return Lookup.skipped()

        if ref.scheme is ProviderScheme.NATIVE:
            return await self._fetch_native(ref.value)

        kind = _KIND_FILTER.get(content_type) if content_type else None
        try:
            candidates = await self._catalog.search_by_provider_id(
                ref.scheme.value, ref.value, kind
            )
        except CatalogUnavailableError:
            log.warning(
                "provider_id_search_failed",
                scheme=ref.scheme.value,
                value=ref.value,
                exc_info=True,
            )
            return Lookup.failed()

        verified = [c for c in candidates if is_verified_match(c, ref)]
        if len(verified) != len(candidates):
            log.info(
                "provider_id_candidates_rejected",
                scheme=ref.scheme.value,
                value=ref.value,
                returned=len(candidates),
                verified=len(verified),
            )
        return Lookup.found(verified)

    async def _fetch_native(self, item_id: str) -> Lookup[MediaItem]:
        try:
            item = await self._catalog.get_item(item_id)
        except CatalogUnavailableError:
            log.warning("native_item_fetch_failed", item_id=item_id, exc_info=True)
            return Lookup.failed()
        if item is None:
            return Lookup.not_found()
        return Lookup.found([item])
