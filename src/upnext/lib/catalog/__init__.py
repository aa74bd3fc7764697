"""Catalog providers: where related titles and search results come from.

Providers are registered by name so the application can choose one from
configuration (see ``upnext.config.get_catalog_name``).
"""

from .base import (
    CatalogError,
    CatalogProvider,
    get_provider,
    list_providers,
    register_provider,
)
from .search_index import SearchIndexCatalogProvider
from .tmdb import TMDBCatalogProvider

# Register built-in providers
register_provider("tmdb", TMDBCatalogProvider)
register_provider("search_index", SearchIndexCatalogProvider)

__all__ = [
    "CatalogError",
    "CatalogProvider",
    "get_provider",
    "list_providers",
    "register_provider",
    "SearchIndexCatalogProvider",
    "TMDBCatalogProvider",
]
