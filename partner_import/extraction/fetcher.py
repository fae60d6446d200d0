"""
Partner Page Fetcher

Issues one GET per import run with browser-like headers and a fixed
timeout. No retries: a failure ends the run.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import requests

from ..common.config_loader import load_importer_settings
from ..common.constants import DEFAULT_HEADERS, DEFAULT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Raised when the source page cannot be fetched."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {reason}")


class PageFetcher:
    """
    Fetches raw HTML from a partner page.

    Usage:
        fetcher = PageFetcher()
        html = fetcher.fetch("https://www.najeebpharmacy.com/products/")
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds (default from config/importer.yaml)
            headers: Request headers (default from config/importer.yaml)
            session: Optional shared requests session owned by the caller
        """
        if timeout is None or headers is None:
            fetch_settings = load_importer_settings().get("fetch", {})
            if timeout is None:
                timeout = fetch_settings.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
            if headers is None:
                headers = fetch_settings.get("headers") or DEFAULT_HEADERS

        self.timeout = timeout
        self.headers = dict(headers)
        self._session = session

    def fetch(self, url: str) -> str:
        """
        Fetch a page and return its HTML.

        Raises:
            FetchError: On timeout, connection failure or non-2xx status
        """
        requester = self._session or requests
        logger.info("Fetching %s", url)

        try:
            response = requester.get(url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout:
            raise FetchError(url, f"timed out after {self.timeout}s") from None
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchError(url, f"HTTP {status}", status_code=status) from e
        except requests.exceptions.RequestException as e:
            raise FetchError(url, str(e)) from e

        logger.info("Fetched %s (%d bytes)", url, len(response.text))
        return response.text
