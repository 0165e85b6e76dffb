"""Domain exceptions."""

from __future__ import annotations


class StreamBridgeError(Exception):
    """Base class for all StreamBridge errors."""


class CatalogUnavailableError(StreamBridgeError):
    """Raised when the media server cannot be reached or answers with an error."""
