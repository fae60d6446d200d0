"""
In-Memory Catalog Store

Dict-backed CatalogStore used for dry runs and tests. Enforces the
same slug uniqueness the storefront database does.
"""

import uuid
from dataclasses import replace
from typing import Dict, Iterable, List

from ..models import CanonicalBrand, CanonicalProduct, Category
from .store import CatalogStore, CatalogStoreError


class InMemoryCatalogStore(CatalogStore):
    """CatalogStore kept in process memory."""

    def __init__(
        self,
        categories: Iterable[Category] = (),
        brands: Iterable[CanonicalBrand] = (),
        products: Iterable[CanonicalProduct] = (),
    ):
        self.categories: Dict[str, Category] = {c.id: c for c in categories}
        self.brands: Dict[str, CanonicalBrand] = {}
        self.products: Dict[str, CanonicalProduct] = {}

        for brand in brands:
            self.create_brand(brand)
        for product in products:
            self.create_product(product)

    @staticmethod
    def _new_id() -> str:
        return uuid.uuid4().hex

    def get_brands(self) -> List[CanonicalBrand]:
        return list(self.brands.values())

    def create_brand(self, brand: CanonicalBrand) -> CanonicalBrand:
        if not brand.name or not brand.slug:
            raise CatalogStoreError("Brand name and slug are required")
        if any(b.slug == brand.slug for b in self.brands.values()):
            raise CatalogStoreError(f"Brand slug already exists: {brand.slug}")
        created = replace(brand, id=brand.id or self._new_id())
        self.brands[created.id] = created
        return created

    def delete_brand(self, brand_id: str) -> bool:
        return self.brands.pop(brand_id, None) is not None

    def get_products(self) -> List[CanonicalProduct]:
        # Storefront listing only returns active products
        return [p for p in self.products.values() if p.is_active]

    def create_product(self, product: CanonicalProduct) -> CanonicalProduct:
        if not product.name or not product.slug:
            raise CatalogStoreError("Product name and slug are required")
        if any(p.slug == product.slug for p in self.products.values()):
            raise CatalogStoreError(f"Product slug already exists: {product.slug}")
        created = replace(product, id=product.id or self._new_id())
        self.products[created.id] = created
        return created

    def get_categories(self) -> List[Category]:
        return list(self.categories.values())
