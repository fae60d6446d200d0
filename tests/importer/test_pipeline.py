"""Tests for partner_import/importer/pipeline.py"""

import pytest

from partner_import.catalog import CatalogStoreError, InMemoryCatalogStore
from partner_import.extraction import FetchError, SiteKind
from partner_import.importer.pipeline import (
    FLOW_BRANDS,
    FLOW_FROM_URL,
    FLOW_PRODUCTS,
    NO_BRANDS_MESSAGE,
    NO_PRODUCTS_MESSAGE,
)
from partner_import.models import (
    CanonicalBrand,
    CanonicalProduct,
    ImportRequest,
    InvalidImportRequest,
    ItemStatus,
)

NAJEEB_URL = "https://www.najeebpharmacy.com/products/"
GENERIC_URL = "https://shaheenchemistrwp.com/shop/"
BRANDS_URL = "https://partner.example.pk/pages/brands"


class FailingStore(InMemoryCatalogStore):
    """In-memory store that rejects selected product names."""

    def __init__(self, failing_names, **kwargs):
        self.failing_names = set(failing_names)
        super().__init__(**kwargs)

    def create_product(self, product):
        if product.name in self.failing_names:
            raise CatalogStoreError("Database write failed")
        return super().create_product(product)


def assert_accounting(result, candidate_count):
    """Every extracted candidate up to the cap ends in exactly one bucket."""
    assert result.imported + result.skipped + result.failed == candidate_count
    assert len(result.items) == candidate_count


def by_name(store):
    return {p.name: p for p in store.products.values()}


class TestBuildRequest:
    @pytest.mark.parametrize("flow,expected", [
        (FLOW_PRODUCTS, 20),
        (FLOW_FROM_URL, 50),
        (FLOW_BRANDS, 200),
    ])
    def test_flow_defaults(self, make_importer, store, flow, expected):
        request = make_importer(store).build_request({"url": NAJEEB_URL}, flow)
        assert request.max_records == expected

    def test_clamped_to_bounds(self, make_importer, store):
        importer = make_importer(store)
        assert importer.build_request({"url": NAJEEB_URL, "maxProducts": 0}, FLOW_PRODUCTS).max_records == 1
        assert importer.build_request({"url": NAJEEB_URL, "maxProducts": 999}, FLOW_PRODUCTS).max_records == 200

    def test_invalid_url(self, make_importer, store):
        with pytest.raises(InvalidImportRequest):
            make_importer(store).build_request({"url": "not-a-url"}, FLOW_PRODUCTS)


class TestImportFromUrl:
    def test_imports_partner_listing(self, make_importer, store, najeeb_listing_html):
        importer = make_importer(store, pages={NAJEEB_URL: najeeb_listing_html})
        result = importer.import_from_url(ImportRequest(NAJEEB_URL, max_records=50))

        assert result.success is True
        assert result.source == "najeebpharmacy.com"
        assert (result.imported, result.skipped, result.failed) == (5, 0, 0)
        assert result.message == "Imported 5 products, skipped 0 duplicates, 0 failed"
        assert len(store.products) == 5
        assert importer.fetcher.calls == [NAJEEB_URL]

    def test_created_product_fields(self, make_importer, store, najeeb_listing_html):
        importer = make_importer(store, pages={NAJEEB_URL: najeeb_listing_html})
        importer.import_from_url(ImportRequest(NAJEEB_URL))

        product = by_name(store)["Centrum Multivitamin 30's"]
        assert product.slug == "centrum-multivitamin-30-s"
        assert product.price == 2500.5
        assert product.stock == 20
        assert product.is_active is True
        assert product.is_featured is False
        assert product.description == f"Imported from {NAJEEB_URL}"
        assert product.images == ["https://www.najeebpharmacy.com/wp-content/uploads/2024/01/centrum.jpg"]

    def test_categories_assigned(self, make_importer, store, najeeb_listing_html):
        importer = make_importer(store, pages={NAJEEB_URL: najeeb_listing_html})
        importer.import_from_url(ImportRequest(NAJEEB_URL))

        categories = {name: p.category_id for name, p in by_name(store).items()}
        assert categories == {
            "Panadol 500mg Tablets": "cat-med",
            "CeraVe Foaming Facial Cleanser 236ml": "cat-skin",
            "Head & Shoulders Anti Dandruff Shampoo": "cat-hair",
            "Centrum Multivitamin 30's": "cat-vit",
            "Pampers Baby Dry Diapers Size 3": "cat-baby",
        }

    def test_brands_linked(self, make_importer, sample_categories, sample_brands, najeeb_listing_html):
        store = InMemoryCatalogStore(categories=sample_categories, brands=sample_brands)
        importer = make_importer(store, pages={NAJEEB_URL: najeeb_listing_html})
        importer.import_from_url(ImportRequest(NAJEEB_URL))

        products = by_name(store)
        assert products["CeraVe Foaming Facial Cleanser 236ml"].brand_id == "brand-cerave"
        assert products["Head & Shoulders Anti Dandruff Shampoo"].brand_id == "brand-hs"
        assert products["Panadol 500mg Tablets"].brand_id is None

    def test_second_run_is_idempotent(self, make_importer, store, najeeb_listing_html):
        importer = make_importer(store, pages={NAJEEB_URL: najeeb_listing_html})
        importer.import_from_url(ImportRequest(NAJEEB_URL))
        result = importer.import_from_url(ImportRequest(NAJEEB_URL))

        assert (result.imported, result.skipped, result.failed) == (0, 5, 0)
        assert {item.error for item in result.items} == {"Product already exists"}
        assert len(store.products) == 5

    def test_max_records(self, make_importer, store, najeeb_listing_html):
        importer = make_importer(store, pages={NAJEEB_URL: najeeb_listing_html})
        result = importer.import_from_url(ImportRequest(NAJEEB_URL, max_records=2))

        assert [item.name for item in result.items] == [
            "Panadol 500mg Tablets", "CeraVe Foaming Facial Cleanser 236ml",
        ]

    def test_unknown_host_reports_hostname(self, make_importer, store, generic_listing_html):
        importer = make_importer(store, pages={GENERIC_URL: generic_listing_html})
        result = importer.import_from_url(ImportRequest(GENERIC_URL))
        assert result.source == "shaheenchemistrwp.com"
        assert result.imported == 3

    def test_empty_page(self, make_importer, store):
        importer = make_importer(store, pages={NAJEEB_URL: ""})
        result = importer.import_from_url(ImportRequest(NAJEEB_URL))

        assert result.success is False
        assert result.message == NO_PRODUCTS_MESSAGE
        assert result.total == 0
        assert result.to_dict()["products"] == []
        assert store.products == {}

    def test_fetch_failure_propagates(self, make_importer, store):
        importer = make_importer(store, error=FetchError(NAJEEB_URL, "HTTP 503", status_code=503))
        with pytest.raises(FetchError):
            importer.import_from_url(ImportRequest(NAJEEB_URL))
        assert store.products == {}


class TestImportProducts:
    def test_generic_listing_outcomes(self, make_importer, store, generic_listing_html):
        importer = make_importer(store, pages={GENERIC_URL: generic_listing_html})
        result = importer.import_products(ImportRequest(GENERIC_URL, max_records=20))

        assert result.source is None
        assert (result.imported, result.skipped, result.failed) == (3, 1, 1)
        assert [(item.name, item.status, item.error) for item in result.items] == [
            ("Neutrogena Hydro Boost Water Gel", ItemStatus.SUCCESS, None),
            ("Sunsilk Shampoo 360ml", ItemStatus.SUCCESS, None),
            ("Panadol Extra 24's", ItemStatus.ERROR, "Invalid price"),
            ("sunsilk shampoo 360ml", ItemStatus.SKIPPED, "Duplicate product on source page"),
            ("Xyz Widget", ItemStatus.SUCCESS, None),
        ]
        assert_accounting(result, 5)

    def test_uses_generic_cascade_for_partner_hosts(self, make_importer, store):
        html = '<div class="product"><h2>Dettol Soap 110g</h2><span class="price">Rs 95</span></div>'
        importer = make_importer(store, pages={NAJEEB_URL: html})
        result = importer.import_products(ImportRequest(NAJEEB_URL))
        assert result.imported == 1
        assert importer.extractor.matched_strategy == "product"

    def test_hint_sku_and_default_category(self, make_importer, store, generic_listing_html):
        importer = make_importer(store, pages={GENERIC_URL: generic_listing_html})
        importer.import_products(ImportRequest(GENERIC_URL))

        products = by_name(store)
        assert products["Neutrogena Hydro Boost Water Gel"].category_id == "cat-skin"
        assert products["Neutrogena Hydro Boost Water Gel"].sku == "101"
        assert products["Xyz Widget"].category_id == "cat-med"

    def test_no_category_without_default(self, make_importer, generic_listing_html):
        store = InMemoryCatalogStore()
        importer = make_importer(store, pages={GENERIC_URL: generic_listing_html})
        importer.import_products(ImportRequest(GENERIC_URL))
        assert by_name(store)["Xyz Widget"].category_id is None

    def test_catalog_dedup_ignores_case_and_spacing(self, make_importer, sample_categories):
        store = InMemoryCatalogStore(
            categories=sample_categories,
            products=[CanonicalProduct(name="Panadol 500mg", slug="panadol-500mg", price=120)],
        )
        html = '<div class="product"><h2>panadol 500mg </h2><span class="price">Rs 125</span></div>'
        importer = make_importer(store, pages={GENERIC_URL: html})
        result = importer.import_products(ImportRequest(GENERIC_URL))

        assert result.skipped == 1
        assert result.items[0].error == "Product already exists"
        assert len(store.products) == 1

    def test_catalog_dedup_by_slug(self, make_importer, sample_categories):
        store = InMemoryCatalogStore(
            categories=sample_categories,
            products=[CanonicalProduct(name="Panadol-500mg", slug="panadol-500mg", price=120)],
        )
        html = '<div class="product"><h2>Panadol (500mg)</h2><span class="price">Rs 125</span></div>'
        importer = make_importer(store, pages={GENERIC_URL: html})
        result = importer.import_products(ImportRequest(GENERIC_URL))

        assert result.items[0].status is ItemStatus.SKIPPED

    def test_create_failure_isolated(self, make_importer, sample_categories, najeeb_listing_html):
        store = FailingStore({"Head & Shoulders Anti Dandruff Shampoo"}, categories=sample_categories)
        importer = make_importer(store, pages={NAJEEB_URL: najeeb_listing_html})
        result = importer.import_from_url(ImportRequest(NAJEEB_URL))

        assert (result.imported, result.skipped, result.failed) == (4, 0, 1)
        failed = [item for item in result.items if item.status is ItemStatus.ERROR]
        assert failed[0].name == "Head & Shoulders Anti Dandruff Shampoo"
        assert failed[0].error == "Database write failed"
        assert failed[0].price == 1099.0
        assert len(store.products) == 4

    def test_invalid_price_keeps_item_without_create(self, make_importer, store):
        html = '<div class="product"><h2>Panadol 500mg</h2><span class="price">Call for price</span></div>'
        importer = make_importer(store, pages={GENERIC_URL: html})
        result = importer.import_products(ImportRequest(GENERIC_URL))

        assert result.success is True
        assert result.failed == 1
        assert result.items[0].price == 0.0
        assert store.products == {}


class TestRunAccounting:
    HTML = """
    <div class="product"><h2>All</h2><span class="price">Rs 1</span></div>
    <div class="product"><h2>View All</h2><span class="price">Rs 1</span></div>
    <div class="product"><h2>Ab</h2><span class="price">Rs 10</span></div>
    <div class="product"><h2>Dettol Soap 110g</h2><span class="price">Rs 95</span></div>
    <div class="product"><h2>Safeguard Soap 130g</h2><span class="price">Rs 110</span></div>
    <div class="product"><h2>dettol soap 110g</h2><span class="price">Rs 95</span></div>
    <div class="product"><h2>Panadol 500mg</h2><span class="price">Call for price</span></div>
    """

    def test_filtered_cards_never_reach_results(self, make_importer, store, extractor):
        candidates = extractor.extract(self.HTML, SiteKind.GENERIC, GENERIC_URL)
        assert [c.name for c in candidates] == [
            "Dettol Soap 110g", "Safeguard Soap 130g", "dettol soap 110g", "Panadol 500mg",
        ]

        importer = make_importer(store, pages={GENERIC_URL: self.HTML})
        result = importer.import_products(ImportRequest(GENERIC_URL, max_records=20))

        assert (result.imported, result.skipped, result.failed) == (2, 1, 1)
        assert_accounting(result, 4)

    def test_cap_bounds_accounting(self, make_importer, store):
        importer = make_importer(store, pages={GENERIC_URL: self.HTML})
        result = importer.import_products(ImportRequest(GENERIC_URL, max_records=3))

        assert (result.imported, result.skipped, result.failed) == (2, 1, 0)
        assert_accounting(result, 3)
        assert "Panadol 500mg" not in [item.name for item in result.items]

    def test_store_failures_counted_once(self, make_importer, sample_categories):
        store = FailingStore({"Safeguard Soap 130g"}, categories=sample_categories)
        importer = make_importer(store, pages={GENERIC_URL: self.HTML})
        result = importer.import_products(ImportRequest(GENERIC_URL))

        assert (result.imported, result.skipped, result.failed) == (1, 1, 2)
        assert_accounting(result, 4)


class TestImportBrands:
    def test_imports_brands(self, make_importer, store, brands_page_html):
        importer = make_importer(store, pages={BRANDS_URL: brands_page_html})
        result = importer.import_brands(ImportRequest(BRANDS_URL))

        assert result.kind == "brands"
        assert (result.imported, result.skipped, result.failed) == (4, 1, 0)
        assert result.items[-1].error == "Duplicate brand on source page"
        assert result.message == "Imported 4 brands, skipped 1 duplicates, 0 failed"
        assert_accounting(result, 5)

    def test_brand_fields(self, make_importer, store, brands_page_html):
        importer = make_importer(store, pages={BRANDS_URL: brands_page_html})
        importer.import_brands(ImportRequest(BRANDS_URL))

        brands = {b.name: b for b in store.get_brands()}
        assert brands["La Roche-Posay"].slug == "la-roche-posay"
        assert brands["The Ordinary"].logo == "https://cdn.partner.pk/the-ordinary.png"
        assert brands["CeraVe"].logo == "https://partner.example.pk/cdn/shop/files/cerave.png"

    def test_existing_brand_skipped(self, make_importer, sample_categories, brands_page_html):
        store = InMemoryCatalogStore(
            categories=sample_categories,
            brands=[CanonicalBrand(name="cerave", slug="cerave", id="b-old")],
        )
        importer = make_importer(store, pages={BRANDS_URL: brands_page_html})
        result = importer.import_brands(ImportRequest(BRANDS_URL))

        assert result.items[0].status is ItemStatus.SKIPPED
        assert result.items[0].error == "Brand already exists"
        assert result.imported == 3

    def test_delete_existing(self, make_importer, sample_categories, brands_page_html):
        store = InMemoryCatalogStore(
            categories=sample_categories,
            brands=[
                CanonicalBrand(name="CeraVe", slug="cerave", id="b-old"),
                CanonicalBrand(name="Old Brand", slug="old-brand", id="b-gone"),
            ],
        )
        importer = make_importer(store, pages={BRANDS_URL: brands_page_html})
        result = importer.import_brands(ImportRequest(BRANDS_URL, delete_existing=True))

        names = {b.name for b in store.get_brands()}
        assert names == {"CeraVe", "Nivea", "La Roche-Posay", "The Ordinary"}
        assert "b-old" not in store.brands
        assert result.imported == 4

    def test_delete_existing_skipped_when_page_empty(self, make_importer, sample_brands):
        store = InMemoryCatalogStore(brands=sample_brands)
        importer = make_importer(store, pages={BRANDS_URL: "<html><body></body></html>"})
        result = importer.import_brands(ImportRequest(BRANDS_URL, delete_existing=True))

        assert result.success is False
        assert result.message == NO_BRANDS_MESSAGE
        assert len(store.get_brands()) == 3

    def test_second_run_is_idempotent(self, make_importer, store, brands_page_html):
        importer = make_importer(store, pages={BRANDS_URL: brands_page_html})
        importer.import_brands(ImportRequest(BRANDS_URL))
        result = importer.import_brands(ImportRequest(BRANDS_URL))

        assert result.imported == 0
        assert result.skipped == 5
        assert len(store.get_brands()) == 4
