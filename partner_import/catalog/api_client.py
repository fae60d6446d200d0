"""
Storefront API Client

CatalogStore backed by the storefront's REST API (/api/brands,
/api/products, /api/categories). Handles authentication, pacing,
retries on transient errors, and error mapping.
"""

from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urljoin

import requests
from dotenv import load_dotenv

from ..models import CanonicalBrand, CanonicalProduct, Category
from .store import CatalogStore, CatalogStoreError

logger = logging.getLogger(__name__)


class StorefrontAPIClient(CatalogStore):
    """
    Catalog gateway over the storefront REST API.

    The HTTP session is created here (or passed in) and released by
    close(); the host application owns the client's lifetime.

    Usage:
        with StorefrontAPIClient("https://shop.example.pk", token="...") as store:
            brands = store.get_brands()
    """

    MAX_RETRIES = 3
    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}
    # A POST that reached a failing gateway may already have been applied
    POST_RETRYABLE_STATUS_CODES = {429}
    MAX_RETRY_DELAY = 60

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        session: requests.Session | None = None,
        timeout: int = 30,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Storefront origin, e.g. "https://shop.example.pk"
            token: Optional bearer token for the admin API
            session: Optional requests session (created if omitted)
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

        # Pacing between calls
        self.requests_made = 0
        self.last_request_time = 0.0
        self.min_request_interval = 0.1

    @classmethod
    def from_env(cls) -> StorefrontAPIClient:
        """
        Build a client from STOREFRONT_API_URL / STOREFRONT_API_TOKEN.

        Reads a .env file from the working directory if present.

        Raises:
            RuntimeError: If STOREFRONT_API_URL is not set
        """
        load_dotenv()
        base_url = os.environ.get("STOREFRONT_API_URL")
        if not base_url:
            raise RuntimeError("STOREFRONT_API_URL environment variable is not set")
        return cls(base_url, token=os.environ.get("STOREFRONT_API_TOKEN"))

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        logger.debug("Closing storefront session after %d requests", self.requests_made)
        self.session.close()

    def _rate_limit(self):
        now = time.time()
        elapsed = now - self.last_request_time

        if elapsed < self.min_request_interval:
            time.sleep(self.min_request_interval - elapsed)

        self.last_request_time = time.time()
        self.requests_made += 1

    def _retry_delay(self, response: requests.Response, attempt: int) -> int:
        """Seconds to wait before the next attempt, honouring Retry-After."""
        header = response.headers.get("Retry-After")
        if header is None:
            return 2 ** attempt
        try:
            delay = int(header)
        except ValueError:
            try:
                retry_at = parsedate_to_datetime(header)
            except (TypeError, ValueError):
                logger.debug("Unparseable Retry-After header: %r", header)
                return 2 ** attempt
            if retry_at.tzinfo is None:
                retry_at = retry_at.replace(tzinfo=timezone.utc)
            delay = int((retry_at - datetime.now(timezone.utc)).total_seconds())
        return min(max(delay, 0), self.MAX_RETRY_DELAY)

    def _is_retryable(self, method: str, status_code: int) -> bool:
        if method == "POST":
            return status_code in self.POST_RETRYABLE_STATUS_CODES
        return status_code in self.RETRYABLE_STATUS_CODES

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text[:200]
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return response.text[:200]

    def request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        allow_not_found: bool = False,
    ) -> Any:
        """
        Make a REST request with pacing and retries.

        Args:
            method: HTTP method (GET, POST, DELETE)
            endpoint: Path below the base URL (e.g., "api/brands")
            data: JSON body for POST
            allow_not_found: Return None on 404 instead of raising

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            CatalogStoreError: On HTTP errors, timeouts or exhausted retries
        """
        url = urljoin(self.base_url, endpoint)

        for attempt in range(self.MAX_RETRIES):
            self._rate_limit()

            try:
                if method == "GET":
                    response = self.session.get(url, timeout=self.timeout)
                elif method == "POST":
                    response = self.session.post(url, json=data, timeout=self.timeout)
                elif method == "DELETE":
                    response = self.session.delete(url, timeout=self.timeout)
                else:
                    raise ValueError(f"Unsupported method: {method}")
            except requests.exceptions.Timeout:
                logger.error("Request timeout: %s %s", method, endpoint)
                raise CatalogStoreError(f"Catalog request timed out: {method} {endpoint}") from None
            except requests.exceptions.RequestException as e:
                logger.error("Request failed: %s", e)
                raise CatalogStoreError(f"Catalog request failed: {e}") from e

            if self._is_retryable(method, response.status_code):
                retry_after = self._retry_delay(response, attempt)
                logger.warning("HTTP %d on %s, retry %d/%d in %ds...",
                               response.status_code, endpoint, attempt + 1,
                               self.MAX_RETRIES, retry_after)
                time.sleep(retry_after)
                continue

            if response.status_code == 404 and allow_not_found:
                return None

            if response.status_code >= 400:
                message = self._error_message(response)
                logger.error("API Error %d on %s: %s", response.status_code, endpoint, message)
                raise CatalogStoreError(message or f"HTTP {response.status_code}")

            if response.status_code == 204 or not response.content:
                return None
            return response.json()

        logger.error("Max retries (%d) exceeded for %s %s", self.MAX_RETRIES, method, endpoint)
        raise CatalogStoreError(f"Max retries exceeded for {method} {endpoint}")

    # Brands

    def get_brands(self) -> List[CanonicalBrand]:
        return [CanonicalBrand.from_payload(item) for item in self.request("GET", "api/brands") or []]

    def create_brand(self, brand: CanonicalBrand) -> CanonicalBrand:
        return CanonicalBrand.from_payload(self.request("POST", "api/brands", brand.to_payload()))

    def delete_brand(self, brand_id: str) -> bool:
        self.request("DELETE", f"api/brands/{quote(brand_id, safe='')}")
        return True

    # Products

    def get_products(self) -> List[CanonicalProduct]:
        return [CanonicalProduct.from_payload(item) for item in self.request("GET", "api/products") or []]

    def create_product(self, product: CanonicalProduct) -> CanonicalProduct:
        return CanonicalProduct.from_payload(self.request("POST", "api/products", product.to_payload()))

    # Categories

    def get_categories(self) -> List[Category]:
        return [Category.from_payload(item) for item in self.request("GET", "api/categories") or []]

    def get_category_by_slug(self, slug: str) -> Optional[Category]:
        data = self.request("GET", f"api/categories/{quote(slug, safe='')}", allow_not_found=True)
        return Category.from_payload(data) if data else None
