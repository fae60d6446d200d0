"""
Extraction modules for partner pharmacy sites.

Modules:
    sites - SiteKind and hostname-based site detection
    strategies - Typed selector cascades loaded from config/partner_sites.yaml
    fetcher - PageFetcher (single GET, browser headers, fixed timeout)
    dom_extractor - CandidateExtractor (runs a cascade over listing HTML)
    price - normalize_price for Rs/PKR formatted prices
    category_classifier - CategoryClassifier (keyword lookup)
    brand_matcher - BrandMatcher (link products to catalog brands)
    deduplicator - Deduplicator (in-run and catalog name checks)
"""

from .brand_matcher import BrandMatcher
from .category_classifier import CategoryClassifier
from .deduplicator import Decision, Deduplicator
from .dom_extractor import CandidateExtractor
from .fetcher import FetchError, PageFetcher
from .price import find_price_text, normalize_price
from .sites import SiteKind, detect_site, get_site_label
from .strategies import ExtractionStrategy, get_brand_strategies, get_product_strategies

__all__ = [
    # Site detection
    'SiteKind',
    'detect_site',
    'get_site_label',
    # Strategies
    'ExtractionStrategy',
    'get_product_strategies',
    'get_brand_strategies',
    # Fetching and extraction
    'PageFetcher',
    'FetchError',
    'CandidateExtractor',
    # Normalization and classification
    'normalize_price',
    'find_price_text',
    'CategoryClassifier',
    'BrandMatcher',
    # Deduplication
    'Deduplicator',
    'Decision',
]
