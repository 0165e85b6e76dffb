"""Authenticated Jellyfin URLs for playback, subtitles and images.

The API key travels as a query parameter so the final URL can be handed to
the player as-is.
"""

from __future__ import annotations

from urllib.parse import quote, urlencode


class JellyfinUrls:
    """Implements ``MediaUrlBuilderPort`` for one Jellyfin server."""

    def __init__(
        self, *, base_url: str, api_key: str, image_max_height: int = 600
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._image_max_height = image_max_height

    def _url(self, path: str, **params: str | int) -> str:
        query = urlencode({**params, "api_key": self._api_key})
        return f"{self._base_url}{path}?{query}"

    def playback_url(self, handle: str) -> str:
        return self._url(f"/Videos/{quote(handle, safe='')}/stream", static="true")

    def subtitle_url(self, handle: str, index: int) -> str:
        return self._url(
            f"/Videos/{quote(handle, safe='')}/Subtitles/{index}/Stream.srt"
        )

    def image_url(self, item_id: str, image_kind: str = "Primary") -> str:
        return self._url(
            f"/Items/{quote(item_id, safe='')}/Images/{quote(image_kind, safe='')}",
            maxHeight=self._image_max_height,
        )
