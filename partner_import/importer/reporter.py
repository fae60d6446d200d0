"""
Import Result Reporter

Collects one outcome per candidate that reached the persistence
decision and turns them into an ImportResult. Candidates dropped by the
extractor's name filter never reach the reporter, so
imported + skipped + failed always equals the number of items recorded.
"""

from typing import List, Optional

from ..models import ImportResult, ImportResultItem, ItemStatus


class ImportReporter:
    """
    Accumulates per-candidate outcomes for one run.

    Usage:
        reporter = ImportReporter(kind="products", source="dwatson.pk")
        reporter.record_success("Panadol 500mg", 120.0, image_url)
        result = reporter.build()
    """

    def __init__(self, kind: str = "products", source: Optional[str] = None):
        self.kind = kind
        self.source = source
        self.items: List[ImportResultItem] = []

    def record_success(self, name: str, price: float = 0.0, image: str = "") -> None:
        self.items.append(ImportResultItem(name, price, image, ItemStatus.SUCCESS))

    def record_skipped(self, name: str, price: float = 0.0, image: str = "", reason: str = "") -> None:
        self.items.append(ImportResultItem(name, price, image, ItemStatus.SKIPPED, reason or None))

    def record_error(self, name: str, price: float = 0.0, image: str = "", error: str = "") -> None:
        self.items.append(ImportResultItem(name, price, image, ItemStatus.ERROR, error or None))

    def count(self, status: ItemStatus) -> int:
        return sum(1 for item in self.items if item.status is status)

    def summary_message(self) -> str:
        return (
            f"Imported {self.count(ItemStatus.SUCCESS)} {self.kind}, "
            f"skipped {self.count(ItemStatus.SKIPPED)} duplicates, "
            f"{self.count(ItemStatus.ERROR)} failed"
        )

    def build(self) -> ImportResult:
        """Build the result of a run that processed candidates."""
        return ImportResult(
            success=True,
            imported=self.count(ItemStatus.SUCCESS),
            skipped=self.count(ItemStatus.SKIPPED),
            failed=self.count(ItemStatus.ERROR),
            items=list(self.items),
            kind=self.kind,
            source=self.source,
            message=self.summary_message(),
        )

    def empty(self, message: str) -> ImportResult:
        """Build the result of a run whose page yielded no candidates."""
        return ImportResult(
            success=False,
            kind=self.kind,
            source=self.source,
            message=message,
        )
