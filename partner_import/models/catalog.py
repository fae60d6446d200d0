"""
Catalog data models.

Records owned by the storefront catalog. The importer creates them and
reads them back for deduplication; it never updates them.
Payload helpers translate to and from the storefront's camelCase JSON.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..common.constants import DEFAULT_STOCK


@dataclass
class Category:
    """Storefront category."""
    id: str
    name: str
    slug: str

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "Category":
        return cls(
            id=str(data.get("id") or data.get("_id") or ""),
            name=data.get("name", ""),
            slug=data.get("slug", ""),
        )


@dataclass
class CanonicalBrand:
    """Storefront brand."""
    name: str
    slug: str
    logo: Optional[str] = None
    description: Optional[str] = None
    id: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "slug": self.slug,
            "logo": self.logo,
            "description": self.description,
        }

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "CanonicalBrand":
        return cls(
            id=str(data.get("id") or data.get("_id") or "") or None,
            name=data.get("name", ""),
            slug=data.get("slug", ""),
            logo=data.get("logo"),
            description=data.get("description"),
        )


@dataclass
class CanonicalProduct:
    """
    Storefront product.

    Imported products are always created active, not featured,
    with a fixed starting stock.
    """
    name: str
    slug: str
    price: float
    description: str = ""
    images: List[str] = field(default_factory=list)
    category_id: Optional[str] = None
    brand_id: Optional[str] = None
    stock: int = DEFAULT_STOCK
    is_active: bool = True
    is_featured: bool = False
    sku: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self):
        if self.price < 0:
            raise ValueError("Product price cannot be negative")

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "price": self.price,
            "images": list(self.images),
            "stock": self.stock,
            "isActive": self.is_active,
            "isFeatured": self.is_featured,
        }
        # Optional references are omitted rather than sent as null
        if self.category_id:
            payload["categoryId"] = self.category_id
        if self.brand_id:
            payload["brandId"] = self.brand_id
        if self.sku:
            payload["sku"] = self.sku
        return payload

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "CanonicalProduct":
        return cls(
            id=str(data.get("id") or data.get("_id") or "") or None,
            name=data.get("name", ""),
            slug=data.get("slug", ""),
            price=float(data.get("price") or 0),
            description=data.get("description") or "",
            images=list(data.get("images") or []),
            category_id=data.get("categoryId"),
            brand_id=data.get("brandId"),
            stock=int(data.get("stock") if data.get("stock") is not None else DEFAULT_STOCK),
            is_active=bool(data.get("isActive", True)),
            is_featured=bool(data.get("isFeatured", False)),
            sku=data.get("sku"),
        )
