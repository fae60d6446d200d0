"""
Import run data models.

ImportRequest is validated at the invocation boundary; ImportResultItem
and ImportResult are produced once per run and returned to the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlparse

from ..common.constants import MAX_RECORDS, MIN_RECORDS


class InvalidImportRequest(ValueError):
    """Raised when an import request is rejected before any network call."""


class ItemStatus(str, Enum):
    SUCCESS = "success"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class ImportRequest:
    """Parameters of a single import run."""
    source_url: str
    max_records: int = MAX_RECORDS
    delete_existing: bool = False

    @staticmethod
    def clamp(value: int, lower: int = MIN_RECORDS, upper: int = MAX_RECORDS) -> int:
        return max(lower, min(upper, value))

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, Any],
        default_max: int = MAX_RECORDS,
        lower: int = MIN_RECORDS,
        upper: int = MAX_RECORDS,
    ) -> "ImportRequest":
        """
        Build a request from a JSON body.

        Accepts 'url', 'maxProducts' (or 'maxRecords') and 'deleteExisting'.

        Raises:
            InvalidImportRequest: If the URL is missing or not an absolute
                http(s) URL, or the record limit is not an integer
        """
        url = payload.get("url")
        if not url or not isinstance(url, str) or not url.strip():
            raise InvalidImportRequest("URL is required")

        url = url.strip()
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InvalidImportRequest(f"Invalid URL: {url}")

        raw_max = payload.get("maxProducts", payload.get("maxRecords"))
        if raw_max is None:
            max_records = default_max
        else:
            # bool is an int subclass; reject it explicitly
            if isinstance(raw_max, bool):
                raise InvalidImportRequest("maxProducts must be an integer")
            try:
                max_records = int(raw_max)
            except (TypeError, ValueError):
                raise InvalidImportRequest("maxProducts must be an integer") from None

        return cls(
            source_url=url,
            max_records=cls.clamp(max_records, lower, upper),
            delete_existing=bool(payload.get("deleteExisting", False)),
        )


@dataclass(frozen=True)
class ImportResultItem:
    """Outcome for one candidate that reached the persistence decision."""
    name: str
    price: float
    image: str
    status: ItemStatus
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "price": self.price,
            "image": self.image,
            "status": self.status.value,
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class ImportResult:
    """Summary of an import run."""
    success: bool
    imported: int = 0
    skipped: int = 0
    failed: int = 0
    items: List[ImportResultItem] = field(default_factory=list)
    kind: str = "products"          # "products" or "brands"; names the item list
    source: Optional[str] = None    # Partner label, only for partner-site imports
    message: Optional[str] = None

    @property
    def total(self) -> int:
        return self.imported + self.skipped + self.failed

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if self.source is not None:
            data["source"] = self.source
        data.update({
            "imported": self.imported,
            "skipped": self.skipped,
            "failed": self.failed,
            self.kind: [item.to_dict() for item in self.items],
        })
        if self.message:
            data["message"] = self.message
        return data
