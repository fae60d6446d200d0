"""
Import orchestration.

Modules:
    pipeline - CatalogImporter (brand, partner-product and generic-product flows)
    reporter - ImportReporter (per-item outcomes -> ImportResult)
"""

from .pipeline import (
    FLOW_BRANDS,
    FLOW_FROM_URL,
    FLOW_PRODUCTS,
    NO_BRANDS_MESSAGE,
    NO_PRODUCTS_MESSAGE,
    CatalogImporter,
)
from .reporter import ImportReporter

__all__ = [
    'CatalogImporter',
    'ImportReporter',
    'FLOW_BRANDS',
    'FLOW_FROM_URL',
    'FLOW_PRODUCTS',
    'NO_BRANDS_MESSAGE',
    'NO_PRODUCTS_MESSAGE',
]
