"""Port for building authenticated media-server URLs."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MediaUrlBuilderPort(Protocol):
    """Deterministic URL builders (pure functions of their inputs)."""

    def playback_url(self, handle: str) -> str: ...

    def subtitle_url(self, handle: str, index: int) -> str: ...

    def image_url(self, item_id: str, image_kind: str = "Primary") -> str: ...
