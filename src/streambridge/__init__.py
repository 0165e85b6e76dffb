"""StreamBridge: a Stremio addon backed by a Jellyfin media server."""

__version__ = "0.1.0"
