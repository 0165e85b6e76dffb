"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "streambridge",
    "environment": "dev",
    "jellyfin": {
        "url": None,
        "user_id": None,
        "api_key": None,
        "server_name": "Jellyfin",
        "search_limit": 20,
    },
    "http": {
        "timeout_seconds": 10.0,
        "follow_redirects": True,
        "user_agent": "StreamBridge/0.1.0",
        "retry_max_attempts": 2,
        "retry_backoff_base": 0.5,
        "retry_max_backoff": 10.0,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "addon": {
        "id": "com.streambridge.jellyfin",
        "version": "0.1.0",
        "name": "StreamBridge",
        "catalog_page_size": 50,
    },
}
