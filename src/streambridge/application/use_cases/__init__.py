from .episode_locator import EpisodeLocator
from .identifier_resolver import IdentifierResolver
from .provider_matcher import ProviderIdMatcher
from .stream_assembler import StreamAssembler
from .stremio_catalog import StremioCatalogUseCase

__all__ = [
    "EpisodeLocator",
    "IdentifierResolver",
    "ProviderIdMatcher",
    "StreamAssembler",
    "StremioCatalogUseCase",
]
