"""
Text Utilities

Helper functions for cleaning scraped text and deriving catalog slugs.
"""

import hashlib
import re
import unicodedata
from typing import Optional
from urllib.parse import urljoin


def clean_text(text: Optional[str]) -> str:
    """Collapse runs of whitespace and strip the ends."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()


def name_key(name: Optional[str]) -> str:
    """
    Build the case-insensitive key used for duplicate detection.

    Example:
        >>> name_key("  Panadol   500mg ")
        'panadol 500mg'
    """
    return clean_text(name).lower()


def generate_slug(name: str) -> str:
    """
    Generate URL-friendly slug from a display name.

    Accented letters are folded to ASCII, everything else that is not a
    lowercase letter or digit becomes a hyphen, and hyphen runs collapse.
    Names with no ASCII letters or digits get a short stable hash instead.

    Args:
        name: Product or brand name

    Returns:
        URL-friendly slug

    Example:
        >>> generate_slug("Panadol Extra (500mg) - 20's")
        'panadol-extra-500mg-20-s'
    """
    folded = unicodedata.normalize('NFKD', name or '')
    folded = folded.encode('ascii', 'ignore').decode('ascii').lower()

    slug = re.sub(r'[^a-z0-9]+', '-', folded)
    slug = re.sub(r'-+', '-', slug)
    slug = slug.strip('-')

    if not slug and name and name.strip():
        digest = hashlib.sha1(name.strip().encode('utf-8')).hexdigest()[:10]
        slug = f"item-{digest}"

    return slug


def absolute_url(url: Optional[str], base_url: str) -> str:
    """Resolve a possibly relative URL against the page it was found on."""
    if not url:
        return ""
    url = url.strip()
    if url.startswith('data:'):
        return ""
    if url.startswith('//'):
        return f"https:{url}"
    return urljoin(base_url, url)
