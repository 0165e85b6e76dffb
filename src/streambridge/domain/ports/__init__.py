from .catalog import MediaCatalogPort
from .urls import MediaUrlBuilderPort

__all__ = ["MediaCatalogPort", "MediaUrlBuilderPort"]
