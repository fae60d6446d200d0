"""
Candidate Deduplicator

Two layers of duplicate detection, both on the case-insensitive,
whitespace-collapsed name key:

1. Within the run: only the first occurrence of a name on the page is
   processed.
2. Against the catalog: names (and optionally slugs) loaded once at run
   start. Every admitted candidate is added straight away, so a later
   candidate in the same run dedups against it too.
"""

from enum import Enum
from typing import Iterable

from ..common.text_utils import name_key


class Decision(str, Enum):
    ADMIT = "admit"
    SKIP_DUPLICATE = "skip_duplicate"


class Deduplicator:
    """
    Tracks names seen in this run and names already in the catalog.

    Usage:
        dedup = Deduplicator(existing_names=[p.name for p in products])
        if not dedup.first_occurrence(candidate.name):
            ...  # listed twice on the page
        elif dedup.admit(candidate.name) is Decision.ADMIT:
            ...  # create it
    """

    def __init__(self, existing_names: Iterable[str] = (), existing_slugs: Iterable[str] = ()):
        self.existing_names = {name_key(name) for name in existing_names if name_key(name)}
        self.existing_slugs = {slug.lower() for slug in existing_slugs if slug}
        self._seen_in_run = set()

    def first_occurrence(self, name: str) -> bool:
        """
        Record a name as seen in this run.

        Returns:
            True the first time a name key is seen, False afterwards
        """
        key = name_key(name)
        if key in self._seen_in_run:
            return False
        self._seen_in_run.add(key)
        return True

    def admit(self, name: str, slug: str = "") -> Decision:
        """
        Decide whether a candidate should be created.

        Args:
            name: Candidate name
            slug: Derived slug, checked when the catalog enforces slug uniqueness

        Returns:
            Decision.ADMIT (and remember the name) or Decision.SKIP_DUPLICATE
        """
        key = name_key(name)
        slug_key = slug.lower() if slug else ""

        if key in self.existing_names or (slug_key and slug_key in self.existing_slugs):
            return Decision.SKIP_DUPLICATE

        self.existing_names.add(key)
        if slug_key:
            self.existing_slugs.add(slug_key)
        return Decision.ADMIT
