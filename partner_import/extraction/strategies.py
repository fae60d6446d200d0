"""
Extraction Strategy Table

Typed descriptors for the per-site selector cascades in
config/partner_sites.yaml. Adding a partner is a config change:
a new SiteKind plus a 'sites' entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Tuple

from ..common.config_loader import load_partner_sites
from .sites import SiteKind

NAME_FALLBACKS = ("none", "anchor_text", "container_text")


@dataclass(frozen=True)
class ExtractionStrategy:
    """One selector + field-mapping rule in a cascade."""

    name: str
    container: str
    lift_to: Tuple[str, ...] = ()
    closest_href_contains: str = ""
    name_image_alt: bool = False
    name_selectors: Tuple[str, ...] = ()
    name_attrs: Tuple[str, ...] = ()
    name_fallback: str = "none"
    price_selectors: Tuple[str, ...] = ()
    price_from_text: bool = False
    image_selectors: Tuple[str, ...] = ()
    require_image: bool = False
    heuristic: bool = False

    def __post_init__(self):
        if not self.name:
            raise ValueError("Strategy name is required")
        if not self.container:
            raise ValueError(f"Strategy {self.name!r} has no container selector")
        if self.name_fallback not in NAME_FALLBACKS:
            raise ValueError(
                f"Strategy {self.name!r}: unknown name_fallback {self.name_fallback!r}"
            )

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> ExtractionStrategy:
        """Build a strategy from one YAML mapping."""
        return cls(
            name=data.get("name", ""),
            container=data.get("container", ""),
            lift_to=tuple(data.get("lift_to") or ()),
            closest_href_contains=data.get("closest_href_contains") or "",
            name_image_alt=bool(data.get("name_image_alt", False)),
            name_selectors=tuple(data.get("name_selectors") or ()),
            name_attrs=tuple(data.get("name_attrs") or ()),
            name_fallback=data.get("name_fallback") or "none",
            price_selectors=tuple(data.get("price_selectors") or ()),
            price_from_text=bool(data.get("price_from_text", False)),
            image_selectors=tuple(data.get("image_selectors") or ()),
            require_image=bool(data.get("require_image", False)),
            heuristic=bool(data.get("heuristic", False)),
        )


@lru_cache(maxsize=None)
def _strategy_table() -> Tuple[Dict[SiteKind, Tuple[ExtractionStrategy, ...]], Tuple[ExtractionStrategy, ...]]:
    config = load_partner_sites()

    sites = {}
    for key, site in (config.get("sites") or {}).items():
        kind = SiteKind(key)
        sites[kind] = tuple(
            ExtractionStrategy.from_mapping(entry) for entry in site.get("strategies", [])
        )

    brands = tuple(
        ExtractionStrategy.from_mapping(entry) for entry in config.get("brand_strategies", [])
    )
    return sites, brands


def get_product_strategies(kind: SiteKind) -> Tuple[ExtractionStrategy, ...]:
    """
    Get the ordered product cascade for a site.

    Sites missing from the table use the generic cascade.
    """
    sites, _ = _strategy_table()
    return sites.get(kind) or sites.get(SiteKind.GENERIC, ())


def get_brand_strategies() -> Tuple[ExtractionStrategy, ...]:
    """Get the ordered brand cascade (shared by all sites)."""
    _, brands = _strategy_table()
    return brands
