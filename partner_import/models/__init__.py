"""
Data models for the partner-site importer.

This module contains pure data classes with no scraping or storage logic.
"""

from .candidate import NormalizedCandidate, RawCandidate
from .catalog import CanonicalBrand, CanonicalProduct, Category
from .import_run import (
    ImportRequest,
    ImportResult,
    ImportResultItem,
    InvalidImportRequest,
    ItemStatus,
)

__all__ = [
    'RawCandidate',
    'NormalizedCandidate',
    'Category',
    'CanonicalBrand',
    'CanonicalProduct',
    'ImportRequest',
    'ImportResult',
    'ImportResultItem',
    'InvalidImportRequest',
    'ItemStatus',
]
