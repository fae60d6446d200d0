"""
Catalog gateway modules.

Modules:
    store - CatalogStore contract and CatalogStoreError
    memory_store - InMemoryCatalogStore for dry runs and tests
    api_client - StorefrontAPIClient over the storefront REST API
"""

from .api_client import StorefrontAPIClient
from .memory_store import InMemoryCatalogStore
from .store import CatalogStore, CatalogStoreError

__all__ = [
    'CatalogStore',
    'CatalogStoreError',
    'InMemoryCatalogStore',
    'StorefrontAPIClient',
]
