"""
Price Normalization

Converts partner-site price strings ("Rs. 1,250", "PKR 2,500.50",
"45,99") into floats.

Partner sites mix comma-thousands and comma-decimal formats. A comma
followed by exactly three digits is a thousands separator; a comma
followed by exactly two digits at the end is a decimal point. This means
an amount like "12,34" always reads as 12.34.
"""

import re
from typing import Optional

# Longest tokens first so "Rs." is removed whole, not as "Rs" + "."
_CURRENCY_TOKENS = re.compile(r'PKR|Rs\.?|₨|₹|\$', re.IGNORECASE)

_THOUSANDS_GROUP = re.compile(r',\d{3}(?!\d)')
_DECIMAL_COMMA = re.compile(r',\d{2}$')
_NUMBER = re.compile(r'\d+(?:\.\d+)?')

# Currency amounts inside free text: prefix or suffix currency marker
PRICE_PATTERN = re.compile(
    r'(?:PKR|Rs\.?|₨|₹|\$)\s*\d[\d,]*(?:\.\d+)?'
    r'|\d[\d,]*(?:\.\d+)?\s*(?:PKR|Rs\.?|₨|₹)',
    re.IGNORECASE,
)


def normalize_price(price_text: Optional[str]) -> float:
    """
    Parse a price string into a number.

    Args:
        price_text: Raw price text from the page

    Returns:
        Parsed price, or 0.0 when no number can be read

    Example:
        >>> normalize_price("Rs. 1,250")
        1250.0
        >>> normalize_price("45,99")
        45.99
    """
    if not price_text:
        return 0.0

    cleaned = _CURRENCY_TOKENS.sub('', price_text)
    cleaned = re.sub(r'\s+', '', cleaned)

    if _THOUSANDS_GROUP.search(cleaned):
        cleaned = cleaned.replace(',', '')
    elif _DECIMAL_COMMA.search(cleaned):
        cleaned = cleaned.replace(',', '.')

    match = _NUMBER.search(cleaned)
    if not match:
        return 0.0

    try:
        return float(match.group(0))
    except ValueError:
        return 0.0


def find_price_text(text: Optional[str]) -> str:
    """Return the first currency amount in a block of text, or ''."""
    if not text:
        return ""
    match = PRICE_PATTERN.search(text)
    return match.group(0).strip() if match else ""
