"""
Partner Site Detection

Classifies a source URL into one of the known partner sites by hostname.
"""

from enum import Enum
from urllib.parse import urlparse


class SiteKind(str, Enum):
    """Known partner sites. GENERIC covers every other host."""

    NAJEEB = "najeeb"
    DWATSON = "dwatson"
    DAWAAI = "dawaai"
    GENERIC = "generic"

    @property
    def domain_fragment(self) -> str:
        return _DOMAIN_FRAGMENTS.get(self, "")

    @property
    def label(self) -> str:
        return _LABELS[self]


# Hostname substrings, checked in this order
_DOMAIN_FRAGMENTS = {
    SiteKind.NAJEEB: "najeeb",
    SiteKind.DWATSON: "dwatson",
    SiteKind.DAWAAI: "dawaai",
}

_LABELS = {
    SiteKind.NAJEEB: "najeebpharmacy.com",
    SiteKind.DWATSON: "dwatson.pk",
    SiteKind.DAWAAI: "dawaai.pk",
    SiteKind.GENERIC: "generic",
}


def detect_site(url: str) -> SiteKind:
    """
    Classify a URL by its hostname.

    Args:
        url: Any URL from the site

    Returns:
        Matching SiteKind, or SiteKind.GENERIC for unknown hosts

    Example:
        >>> detect_site("https://www.najeebpharmacy.com/products/")
        <SiteKind.NAJEEB: 'najeeb'>
    """
    hostname = (urlparse(url).hostname or "").lower()

    for kind, fragment in _DOMAIN_FRAGMENTS.items():
        if fragment in hostname:
            return kind

    return SiteKind.GENERIC


def get_site_label(url: str) -> str:
    """
    Get a display label for the source site of a URL.

    Known partners get their canonical domain; other hosts are
    reported by their own hostname.
    """
    kind = detect_site(url)
    if kind is SiteKind.GENERIC:
        return (urlparse(url).hostname or "").lower() or kind.label
    return kind.label
