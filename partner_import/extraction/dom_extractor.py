"""
DOM Candidate Extractor

Turns a fetched listing page into raw product or brand candidates by
running the site's strategy cascade (see strategies.py). The first
strategy that yields at least one candidate wins; later strategies are
not tried. An exhausted cascade returns an empty list, never raises.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup, NavigableString, Tag

from ..common.config_loader import get_blacklist_lowercase, load_importer_settings
from ..common.constants import MIN_NAME_LENGTH
from ..common.text_utils import absolute_url, clean_text
from ..models import RawCandidate
from .price import find_price_text
from .sites import SiteKind
from .strategies import ExtractionStrategy, get_brand_strategies, get_product_strategies

logger = logging.getLogger(__name__)

IMAGE_ATTRS = ("src", "data-src", "data-lazy-src")
SKU_ATTRS = ("data-sku", "data-product-sku", "data-product-id")

_PRODUCT_CAT_CLASS = re.compile(r'product-cat-([a-z0-9-]+)', re.IGNORECASE)


class CandidateExtractor:
    """
    Extracts raw candidates from listing HTML.

    Usage:
        extractor = CandidateExtractor()
        candidates = extractor.extract(html, SiteKind.NAJEEB, base_url=url)
        strategy = extractor.matched_strategy   # e.g. "loop-product-links"
    """

    def __init__(
        self,
        min_name_length: Optional[int] = None,
        blacklist: Optional[Iterable[str]] = None,
    ):
        """
        Initialize the extractor.

        Args:
            min_name_length: Shortest accepted name (default from config)
            blacklist: Disallowed names, any case (default from config)
        """
        if min_name_length is None:
            min_name_length = load_importer_settings().get("min_name_length", MIN_NAME_LENGTH)
        self.min_name_length = min_name_length
        self.blacklist = get_blacklist_lowercase(list(blacklist) if blacklist is not None else None)
        self.matched_strategy: Optional[str] = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(self, html: str, site_kind: SiteKind, base_url: str = "") -> List[RawCandidate]:
        """Extract product candidates using the cascade for site_kind."""
        return self._run_cascade(html, get_product_strategies(site_kind), base_url, site_kind.value)

    def extract_brands(self, html: str, base_url: str = "") -> List[RawCandidate]:
        """Extract brand candidates; image_url holds the logo."""
        return self._run_cascade(html, get_brand_strategies(), base_url, "brands")

    def run_strategies(
        self,
        html: str,
        strategies: Iterable[ExtractionStrategy],
        base_url: str = "",
    ) -> List[RawCandidate]:
        """Run an explicit cascade (used by tests and ad-hoc tables)."""
        return self._run_cascade(html, tuple(strategies), base_url, "custom")

    def is_acceptable_name(self, name: str) -> bool:
        """Check a cleaned name against the length and blacklist filters."""
        if len(name) < self.min_name_length:
            return False
        return name.lower() not in self.blacklist

    # ------------------------------------------------------------------
    # Cascade
    # ------------------------------------------------------------------

    def _run_cascade(
        self,
        html: str,
        strategies: Tuple[ExtractionStrategy, ...],
        base_url: str,
        cascade_label: str,
    ) -> List[RawCandidate]:
        self.matched_strategy = None

        if not html or not html.strip():
            logger.info("Empty document, no candidates (%s)", cascade_label)
            return []

        soup = BeautifulSoup(html, "lxml")

        for strategy in strategies:
            candidates = self._apply(soup, strategy, base_url)
            if candidates:
                self.matched_strategy = strategy.name
                logger.info("Strategy %s/%s matched %d candidates",
                            cascade_label, strategy.name, len(candidates))
                return candidates
            logger.debug("Strategy %s/%s matched nothing", cascade_label, strategy.name)

        logger.info("No strategy matched (%s, %d tried)", cascade_label, len(strategies))
        return []

    def _apply(self, soup: BeautifulSoup, strategy: ExtractionStrategy, base_url: str) -> List[RawCandidate]:
        candidates = []
        for element in self._select_containers(soup, strategy):
            candidate = self._build_candidate(element, strategy, base_url)
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    def _select_containers(self, soup: BeautifulSoup, strategy: ExtractionStrategy) -> List[Tag]:
        elements = soup.select(strategy.container)

        if strategy.closest_href_contains:
            fragment = strategy.closest_href_contains
            elements = [
                el for el in elements
                if fragment in (self._enclosing_href(el) or "")
            ]

        if strategy.lift_to:
            lifted = []
            seen = set()
            for el in elements:
                parent = el.find_parent(list(strategy.lift_to))
                if parent is None or id(parent) in seen:
                    continue
                if strategy.require_image and parent.find("img") is None:
                    continue
                seen.add(id(parent))
                lifted.append(parent)
            elements = lifted

        if strategy.heuristic:
            elements = self._outermost_records(elements, strategy)

        return elements

    def _outermost_records(self, elements: List[Tag], strategy: ExtractionStrategy) -> List[Tag]:
        """
        Reduce a broad class match to one container per record.

        A container qualifies when it holds a name element plus an image or
        a price. Wrappers around two or more qualifying containers are
        listings, not records; qualifying containers inside a kept record
        are its parts.
        """
        qualifying = [el for el in elements if self._looks_like_record(el, strategy)]
        qualifying_ids = {id(el) for el in qualifying}

        kept = []
        kept_ids = set()
        for el in qualifying:
            if any(id(parent) in kept_ids for parent in el.parents):
                continue
            nested = sum(1 for child in el.find_all(True) if id(child) in qualifying_ids)
            if nested >= 2:
                continue
            kept.append(el)
            kept_ids.add(id(el))
        return kept

    def _looks_like_record(self, element: Tag, strategy: ExtractionStrategy) -> bool:
        if not self._name_text(element, strategy):
            return False
        return element.find("img") is not None or bool(find_price_text(element.get_text(" ")))

    # ------------------------------------------------------------------
    # Field extraction
    # ------------------------------------------------------------------

    def _build_candidate(self, element: Tag, strategy: ExtractionStrategy, base_url: str) -> Optional[RawCandidate]:
        name = clean_text(self._resolve_name(element, strategy))
        if not self.is_acceptable_name(name):
            if name:
                logger.debug("Dropped candidate name %r", name)
            return None

        image_url = absolute_url(self._resolve_image(element, strategy), base_url)
        if strategy.require_image and not image_url:
            return None

        return RawCandidate(
            name=name,
            price_text=self._resolve_price(element, strategy),
            image_url=image_url,
            product_url=absolute_url(self._resolve_link(element), base_url),
            category_hint=self._resolve_category_hint(element),
            sku=self._resolve_sku(element),
        )

    def _resolve_name(self, element: Tag, strategy: ExtractionStrategy) -> str:
        if strategy.name_image_alt:
            img = element if element.name == "img" else element.find("img")
            if img is not None and clean_text(img.get("alt")):
                return img.get("alt")

        text = self._name_text(element, strategy)
        if text:
            return text

        for attr in strategy.name_attrs:
            value = element.get(attr)
            if isinstance(value, str) and value.strip():
                return value

        if strategy.name_fallback == "anchor_text":
            anchors = [element] if element.name == "a" else element.find_all("a")
            for anchor in anchors:
                text = clean_text(anchor.get_text(" "))
                if text:
                    return text
        elif strategy.name_fallback == "container_text":
            own_text = clean_text(" ".join(
                str(child) for child in element.children if isinstance(child, NavigableString)
            ))
            return own_text or element.get_text(" ")

        return ""

    def _resolve_price(self, element: Tag, strategy: ExtractionStrategy) -> str:
        text = self._first_text(element, strategy.price_selectors)
        if text:
            return text
        if strategy.price_from_text:
            return find_price_text(element.get_text(" "))
        return ""

    def _resolve_image(self, element: Tag, strategy: ExtractionStrategy) -> str:
        if element.name == "img":
            images = [element]
        else:
            images = [element.select_one(selector) for selector in strategy.image_selectors]

        for img in images:
            if img is None:
                continue
            for attr in IMAGE_ATTRS:
                value = img.get(attr)
                # Lazy loaders park a data: placeholder in src
                if value and not value.strip().startswith("data:"):
                    return value.strip()
        return ""

    @staticmethod
    def _resolve_link(element: Tag) -> str:
        if element.name == "a" and element.get("href"):
            return element["href"]
        anchor = element.find("a", href=True)
        if anchor is not None:
            return anchor["href"]
        parent = element.find_parent("a", href=True)
        return parent["href"] if parent is not None else ""

    @staticmethod
    def _resolve_category_hint(element: Tag) -> str:
        hint = element.get("data-category") or ""
        if not hint:
            inner = element.find(attrs={"data-category": True})
            if inner is not None:
                hint = inner["data-category"]
        if not hint:
            outer = element.find_parent(attrs={"data-category": True})
            if outer is not None:
                hint = outer["data-category"]

        # WooCommerce marks the primary category in the item classes
        match = _PRODUCT_CAT_CLASS.search(" ".join(element.get("class") or []))
        if match:
            hint = match.group(1)
        return hint.strip() if isinstance(hint, str) else ""

    @staticmethod
    def _resolve_sku(element: Tag) -> str:
        for attr in SKU_ATTRS:
            value = element.get(attr)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return ""

    @staticmethod
    def _enclosing_href(element: Tag) -> str:
        if element.name == "a":
            return element.get("href", "")
        anchor = element.find_parent("a")
        return anchor.get("href", "") if anchor is not None else ""

    def _name_text(self, element: Tag, strategy: ExtractionStrategy) -> str:
        if strategy.heuristic:
            # Unknown markup: the first heading or link in the card is the title
            return self._first_text_in_document_order(element, strategy.name_selectors)
        return self._first_text(element, strategy.name_selectors)

    @staticmethod
    def _first_text(element: Tag, selectors: Iterable[str]) -> str:
        for selector in selectors:
            found = element.select_one(selector)
            if found is not None:
                text = clean_text(found.get_text(" "))
                if text:
                    return text
        return ""

    @staticmethod
    def _first_text_in_document_order(element: Tag, selectors: Iterable[str]) -> str:
        selectors = list(selectors)
        if not selectors:
            return ""
        for found in element.select(", ".join(selectors)):
            text = clean_text(found.get_text(" "))
            if text:
                return text
        return ""
