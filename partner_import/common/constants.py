"""
Shared constants for the importer.

Fallback values used when a setting is absent from config/importer.yaml.
"""

DEFAULT_TIMEOUT_SECONDS = 30

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

MIN_RECORDS = 1
MAX_RECORDS = 200

MIN_NAME_LENGTH = 3

DEFAULT_STOCK = 20
