from .client import HttpxJellyfinClient
from .urls import JellyfinUrls

__all__ = ["HttpxJellyfinClient", "JellyfinUrls"]
