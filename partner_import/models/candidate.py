"""
Candidate data models.

Transient records produced by the DOM extractor and consumed by the
import pipeline. Never persisted.
"""

from dataclasses import dataclass


@dataclass
class RawCandidate:
    """A product or brand record as scraped, before price normalization."""
    name: str
    price_text: str = ""        # Raw price text, e.g. "Rs. 1,250"
    image_url: str = ""         # Absolute product image or brand logo URL
    product_url: str = ""       # Absolute link to the partner's detail page
    category_hint: str = ""     # data-category / product-cat-* class text
    sku: str = ""

    def __post_init__(self):
        """Validate required fields after initialization."""
        self.name = self.name.strip() if self.name else ""
        if not self.name:
            raise ValueError("Candidate name is required")


@dataclass
class NormalizedCandidate:
    """A candidate whose price text has been resolved to a number."""
    name: str
    price: float
    image_url: str = ""
    product_url: str = ""
    category_hint: str = ""
    sku: str = ""

    @classmethod
    def from_raw(cls, raw: RawCandidate, price: float) -> "NormalizedCandidate":
        return cls(
            name=raw.name,
            price=price,
            image_url=raw.image_url,
            product_url=raw.product_url,
            category_hint=raw.category_hint,
            sku=raw.sku,
        )
