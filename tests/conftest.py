"""Shared test fixtures."""

from pathlib import Path

import pytest

from partner_import.catalog import InMemoryCatalogStore
from partner_import.extraction import CandidateExtractor, FetchError
from partner_import.importer import CatalogImporter
from partner_import.models import CanonicalBrand, Category

FIXTURES_DIR = Path(__file__).parent / "fixtures"

BLACKLIST = ["All", "View All", "Shop Now", "Read More", "Add to cart", "Home", "Brands"]

SETTINGS = {
    "max_records": {
        "min": 1,
        "max": 200,
        "defaults": {"import_products": 20, "import_from_url": 50, "import_brands": 200},
    },
    "min_name_length": 3,
    "blacklisted_names": BLACKLIST,
    "default_category": "medicines",
    "product_defaults": {"stock": 20},
}


class StubFetcher:
    """Returns canned HTML per URL and records every fetch."""

    def __init__(self, pages=None, error=None):
        self.pages = pages or {}
        self.error = error
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        if url not in self.pages:
            raise FetchError(url, "HTTP 404", status_code=404)
        return self.pages[url]


def read_fixture(name):
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def fixtures_dir():
    """Return path to fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def najeeb_listing_html():
    return read_fixture("najeeb_listing.html")


@pytest.fixture
def dwatson_listing_html():
    return read_fixture("dwatson_listing.html")


@pytest.fixture
def dawaai_listing_html():
    return read_fixture("dawaai_listing.html")


@pytest.fixture
def generic_listing_html():
    return read_fixture("generic_listing.html")


@pytest.fixture
def brands_page_html():
    return read_fixture("brands_page.html")


@pytest.fixture
def sample_categories():
    """Storefront categories matching config/category_keywords.yaml."""
    return [
        Category(id="cat-skin", name="Skin Care", slug="skin-care"),
        Category(id="cat-hair", name="Hair Care", slug="hair-care"),
        Category(id="cat-vit", name="Vitamins", slug="vitamins"),
        Category(id="cat-baby", name="Baby", slug="baby"),
        Category(id="cat-med", name="Medicines", slug="medicines"),
    ]


@pytest.fixture
def sample_brands():
    return [
        CanonicalBrand(name="CeraVe", slug="cerave", id="brand-cerave"),
        CanonicalBrand(name="La Roche-Posay", slug="la-roche-posay", id="brand-lrp"),
        CanonicalBrand(name="Head & Shoulders", slug="head-shoulders", id="brand-hs"),
    ]


@pytest.fixture
def store(sample_categories):
    """Empty catalog with the sample categories."""
    return InMemoryCatalogStore(categories=sample_categories)


@pytest.fixture
def settings():
    return dict(SETTINGS)


@pytest.fixture
def extractor():
    """Extractor with an explicit blacklist, independent of config."""
    return CandidateExtractor(min_name_length=3, blacklist=BLACKLIST)


@pytest.fixture
def make_importer(settings, extractor):
    """Build a CatalogImporter over a store and a page map."""
    def _make(store, pages=None, error=None):
        fetcher = StubFetcher(pages=pages, error=error)
        return CatalogImporter(store, fetcher=fetcher, extractor=extractor, settings=settings)
    return _make
