"""
Catalog Importer

Runs the three import flows against a CatalogStore:

    import_brands      brand logos from a partner brands page
    import_from_url    products from a known partner (site-specific cascade)
    import_products    products from any site (generic cascade)

Each run fetches one page, extracts candidates, and then handles them one
at a time in page order: in-run dedup, price check, catalog dedup,
classification, create. A failure to create one record is reported on
that record and the run continues. Nothing is rolled back.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from ..catalog import CatalogStore
from ..common.config_loader import load_importer_settings
from ..common.constants import DEFAULT_STOCK, MAX_RECORDS, MIN_RECORDS
from ..common.text_utils import generate_slug
from ..extraction import (
    BrandMatcher,
    CandidateExtractor,
    CategoryClassifier,
    Decision,
    Deduplicator,
    PageFetcher,
    SiteKind,
    detect_site,
    get_site_label,
    normalize_price,
)
from ..models import (
    CanonicalBrand,
    CanonicalProduct,
    ImportRequest,
    ImportResult,
    NormalizedCandidate,
    RawCandidate,
)
from .reporter import ImportReporter

logger = logging.getLogger(__name__)

NO_BRANDS_MESSAGE = "No brands found on the page. The website structure may not be supported."
NO_PRODUCTS_MESSAGE = "No products found on the page. The website structure may not be supported."

# Flow names, also the keys of max_records.defaults in config/importer.yaml
FLOW_BRANDS = "import_brands"
FLOW_FROM_URL = "import_from_url"
FLOW_PRODUCTS = "import_products"

_DEFAULT_MAX = {FLOW_BRANDS: MAX_RECORDS, FLOW_FROM_URL: 50, FLOW_PRODUCTS: 20}


class CatalogImporter:
    """Imports partner-site brands and products into a catalog store."""

    def __init__(
        self,
        store: CatalogStore,
        fetcher: Optional[PageFetcher] = None,
        extractor: Optional[CandidateExtractor] = None,
        settings: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the importer.

        Args:
            store: Catalog gateway; its lifetime belongs to the caller
            fetcher: Page fetcher (default PageFetcher from config)
            extractor: Candidate extractor (default from config)
            settings: Importer settings (if None, loads config/importer.yaml)
        """
        self.settings = settings if settings is not None else load_importer_settings()
        self.store = store
        self.fetcher = fetcher or PageFetcher()
        self.extractor = extractor or CandidateExtractor(
            min_name_length=self.settings.get("min_name_length"),
            blacklist=self.settings.get("blacklisted_names"),
        )
        self.default_stock = (self.settings.get("product_defaults") or {}).get("stock", DEFAULT_STOCK)

    def build_request(self, payload: Mapping[str, Any], flow: str) -> ImportRequest:
        """
        Validate a JSON payload for one of the flows.

        Raises:
            InvalidImportRequest: If the payload is rejected
        """
        bounds = self.settings.get("max_records") or {}
        defaults = bounds.get("defaults") or {}
        return ImportRequest.from_payload(
            payload,
            default_max=defaults.get(flow, _DEFAULT_MAX[flow]),
            lower=bounds.get("min", MIN_RECORDS),
            upper=bounds.get("max", MAX_RECORDS),
        )

    # ------------------------------------------------------------------
    # Brands
    # ------------------------------------------------------------------

    def import_brands(self, request: ImportRequest) -> ImportResult:
        """
        Import brands from a partner brands page.

        With delete_existing, every catalog brand is deleted once the page
        has yielded candidates, before dedup names are loaded.

        Raises:
            FetchError: If the page cannot be fetched
            CatalogStoreError: If existing brands cannot be read or deleted
        """
        reporter = ImportReporter(kind="brands")

        html = self.fetcher.fetch(request.source_url)
        candidates = self.extractor.extract_brands(html, base_url=request.source_url)
        if not candidates:
            logger.warning("No brands found at %s", request.source_url)
            return reporter.empty(NO_BRANDS_MESSAGE)

        if request.delete_existing:
            existing = self.store.get_brands()
            logger.info("Deleting %d existing brands", len(existing))
            for brand in existing:
                self.store.delete_brand(brand.id)

        existing = self.store.get_brands()
        dedup = Deduplicator(
            existing_names=[b.name for b in existing],
            existing_slugs=[b.slug for b in existing],
        )

        for candidate in candidates[:request.max_records]:
            self._import_brand(candidate, dedup, reporter)

        result = reporter.build()
        logger.info(result.message)
        return result

    def _import_brand(self, candidate: RawCandidate, dedup: Deduplicator, reporter: ImportReporter) -> None:
        name = candidate.name
        logo = candidate.image_url

        if not dedup.first_occurrence(name):
            logger.debug("Skipping %r: listed twice on page", name)
            reporter.record_skipped(name, 0.0, logo, "Duplicate brand on source page")
            return

        slug = generate_slug(name)
        if dedup.admit(name, slug) is Decision.SKIP_DUPLICATE:
            logger.debug("Skipping %r: already in catalog", name)
            reporter.record_skipped(name, 0.0, logo, "Brand already exists")
            return

        try:
            self.store.create_brand(CanonicalBrand(name=name, slug=slug, logo=logo or None))
        except Exception as e:
            logger.warning("Failed to create brand %r: %s", name, e)
            reporter.record_error(name, 0.0, logo, str(e) or "Failed to create brand")
            return

        reporter.record_success(name, 0.0, logo)

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def import_from_url(self, request: ImportRequest) -> ImportResult:
        """
        Import products from a partner listing page.

        The cascade is picked from the URL's hostname; unknown hosts use
        the generic cascade. The result carries the partner label as source.

        Raises:
            FetchError: If the page cannot be fetched
            CatalogStoreError: If existing catalog data cannot be read
        """
        site_kind = detect_site(request.source_url)
        logger.info("Detected site %s for %s", site_kind.value, request.source_url)
        return self._import_products(request, site_kind, source=get_site_label(request.source_url))

    def import_products(self, request: ImportRequest) -> ImportResult:
        """
        Import products from any listing page using the generic cascade.

        Raises:
            FetchError: If the page cannot be fetched
            CatalogStoreError: If existing catalog data cannot be read
        """
        return self._import_products(request, SiteKind.GENERIC, source=None)

    def _import_products(self, request: ImportRequest, site_kind: SiteKind, source: Optional[str]) -> ImportResult:
        reporter = ImportReporter(kind="products", source=source)

        html = self.fetcher.fetch(request.source_url)
        candidates = self.extractor.extract(html, site_kind, base_url=request.source_url)
        if not candidates:
            logger.warning("No products found at %s", request.source_url)
            return reporter.empty(NO_PRODUCTS_MESSAGE)

        existing = self.store.get_products()
        dedup = Deduplicator(
            existing_names=[p.name for p in existing],
            existing_slugs=[p.slug for p in existing],
        )
        classifier = CategoryClassifier(
            categories=self.store.get_categories(),
            default_category=self.settings.get("default_category"),
        )
        brand_matcher = BrandMatcher(self.store.get_brands())

        for candidate in candidates[:request.max_records]:
            self._import_product(candidate, request, dedup, classifier, brand_matcher, reporter)

        result = reporter.build()
        logger.info(result.message)
        return result

    def _import_product(
        self,
        candidate: RawCandidate,
        request: ImportRequest,
        dedup: Deduplicator,
        classifier: CategoryClassifier,
        brand_matcher: BrandMatcher,
        reporter: ImportReporter,
    ) -> None:
        normalized = NormalizedCandidate.from_raw(candidate, normalize_price(candidate.price_text))
        name = normalized.name
        image = normalized.image_url
        price = normalized.price

        if not dedup.first_occurrence(name):
            logger.debug("Skipping %r: listed twice on page", name)
            reporter.record_skipped(name, price, image, "Duplicate product on source page")
            return

        if price <= 0:
            logger.debug("Rejecting %r: unreadable price %r", name, candidate.price_text)
            reporter.record_error(name, 0.0, image, "Invalid price")
            return

        slug = generate_slug(name)
        if dedup.admit(name, slug) is Decision.SKIP_DUPLICATE:
            logger.debug("Skipping %r: already in catalog", name)
            reporter.record_skipped(name, price, image, "Product already exists")
            return

        try:
            product = CanonicalProduct(
                name=name,
                slug=slug,
                price=price,
                description=f"Imported from {request.source_url}",
                images=[image] if image else [],
                category_id=classifier.classify(name, normalized.category_hint, normalized.product_url),
                brand_id=brand_matcher.match_brand_id(name),
                stock=self.default_stock,
                sku=normalized.sku or None,
            )
            self.store.create_product(product)
        except Exception as e:
            logger.warning("Failed to create product %r: %s", name, e)
            reporter.record_error(name, price, image, str(e) or "Failed to create product")
            return

        reporter.record_success(name, price, image)

