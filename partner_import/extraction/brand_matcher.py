"""
Brand Matcher

Links imported product names to brands already in the catalog using
title prefix matching. Multi-word brands are checked first, so
"La Roche-Posay Effaclar" matches "La Roche-Posay" before "La".
"""

from typing import Dict, Iterable, Optional

from ..models import CanonicalBrand


class BrandMatcher:
    """
    Matches product titles to catalog brands.

    Usage:
        matcher = BrandMatcher(store.get_brands())
        brand_id = matcher.match_brand_id("Nivea Creme 150ml")
    """

    def __init__(self, brands: Iterable[CanonicalBrand] = ()):
        """
        Initialize the brand matcher.

        Args:
            brands: Catalog brands to match against
        """
        self.brands_lower: Dict[str, CanonicalBrand] = {}
        for brand in brands:
            key = " ".join(brand.name.split()).lower()
            if key and key not in self.brands_lower:
                self.brands_lower[key] = brand

    def match_from_title(self, title: str) -> Optional[CanonicalBrand]:
        """
        Find the brand a product title starts with.

        Tries the first 3 words, then 2, then 1.

        Args:
            title: Product title

        Returns:
            Matched brand or None

        Example:
            >>> matcher.match_from_title("La Roche-Posay Effaclar Gel 200ml").name
            'La Roche-Posay'
        """
        if not title:
            return None

        words = title.split()

        for n in [3, 2, 1]:
            if len(words) >= n:
                candidate = ' '.join(words[:n]).lower()
                if candidate in self.brands_lower:
                    return self.brands_lower[candidate]

        return None

    def match_brand_id(self, title: str) -> Optional[str]:
        """Return the id of the brand a title starts with, if any."""
        brand = self.match_from_title(title)
        return brand.id if brand is not None else None
