"""
Category Classifier

Maps product names to storefront categories using keyword lists from
config/category_keywords.yaml.

Resolution order:
1. Keyword match on name, page hints and the link path (never the
   hostname), categories in config order
2. Product link path containing a catalog category slug or name
3. The configured default category (if it exists in the catalog)
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse

from ..common.config_loader import load_category_keywords, load_importer_settings
from ..models import Category

_UNSET = object()


class CategoryClassifier:
    """
    Best-guess category assignment for imported products.

    Usage:
        classifier = CategoryClassifier(categories=store.get_categories())
        category_id = classifier.classify("Panadol 500mg Tablets")
    """

    def __init__(
        self,
        categories: Iterable[Category] = (),
        keywords: Optional[Dict[str, List[str]]] = None,
        default_category=_UNSET,
    ):
        """
        Initialize the classifier.

        Args:
            categories: Catalog categories; only these can be returned
            keywords: Category slug -> keywords (if None, loads from config)
            default_category: Fallback slug; None disables the fallback
                (if omitted, loads from config)
        """
        if keywords is None:
            keywords = load_category_keywords()
        if default_category is _UNSET:
            default_category = load_importer_settings().get("default_category")

        self.keywords = {
            slug: [kw.lower() for kw in words]
            for slug, words in keywords.items()
        }
        self.default_category = default_category
        self.categories = list(categories)
        self._by_slug = {c.slug: c for c in self.categories}

    def match_keyword(self, text: str) -> Optional[str]:
        """
        Return the first category slug with a keyword in text.

        Does not consult the catalog.

        Example:
            >>> classifier.match_keyword("Head & Shoulders Shampoo")
            'hair-care'
        """
        text = (text or "").lower()
        for slug, words in self.keywords.items():
            if any(word in text for word in words):
                return slug
        return None

    def classify(self, name: str, hint: str = "", product_url: str = "") -> Optional[str]:
        """
        Resolve a product to a catalog category id.

        Args:
            name: Product name
            hint: Category text found on the page (data-category, classes)
            product_url: Link to the product on the partner site

        Returns:
            Category id, or None when nothing matches and no default exists
        """
        path = urlparse(product_url).path.lower() if product_url else ""
        search_text = " ".join(part for part in (name, hint, path) if part).lower()

        # Keywords whose category is missing from the catalog are skipped
        for slug, words in self.keywords.items():
            if slug in self._by_slug and any(word in search_text for word in words):
                return self._by_slug[slug].id

        if path:
            for category in self.categories:
                hyphenated = "-".join(category.name.lower().split())
                if (category.slug and category.slug in path) or (hyphenated and hyphenated in path):
                    return category.id

        if self.default_category and self.default_category in self._by_slug:
            return self._by_slug[self.default_category].id

        return None
