"""
Catalog Store Contract

The importer reads and creates catalog records through this interface.
Storage, connections and transactions belong to the implementation and
its owner, not to the importer.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import CanonicalBrand, CanonicalProduct, Category


class CatalogStoreError(Exception):
    """Raised when the catalog rejects or cannot complete an operation."""


class CatalogStore(ABC):
    """Read/create operations the importer needs from the catalog."""

    @abstractmethod
    def get_brands(self) -> List[CanonicalBrand]:
        ...

    @abstractmethod
    def create_brand(self, brand: CanonicalBrand) -> CanonicalBrand:
        ...

    @abstractmethod
    def delete_brand(self, brand_id: str) -> bool:
        ...

    @abstractmethod
    def get_products(self) -> List[CanonicalProduct]:
        ...

    @abstractmethod
    def create_product(self, product: CanonicalProduct) -> CanonicalProduct:
        ...

    @abstractmethod
    def get_categories(self) -> List[Category]:
        ...

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        for category in self.get_categories():
            if category.slug == slug:
                return category
        return None
