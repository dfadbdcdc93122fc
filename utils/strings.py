"""String processing utilities for the scheme monitor.

Fund amounts arrive as display strings ("Rs. 1,20,000", "₹ 45,000") and are
parsed here, in one place, by every aggregation and edit path.
"""

import math
from datetime import date

from utils.patterns import AMOUNT_TOKEN, CURRENCY_SYMBOLS, ISO_DATE


def parse_currency(val, default: float = 0.0) -> float:
    """Extract the numeric value from a formatted currency string.

    Handles:
    - None, empty strings -> default
    - Numeric types -> float (bools, NaN and infinities are rejected)
    - Strings with currency prefixes, whitespace and any digit grouping
      ("Rs. 1,20,000" -> 120000.0, "₹1,200.50" -> 1200.5)
    - Invalid input -> default

    Only the first numeric token is used, so the dot in "Rs." is never read
    as a decimal point.

    Args:
        val: Value to convert (any type)
        default: Value to return on failure (default: 0.0)

    Returns:
        float: Parsed value or default
    """
    if val is None or isinstance(val, bool):
        return default
    if isinstance(val, (int, float)):
        try:
            val = float(val)
        except OverflowError:
            return default
        return val if math.isfinite(val) else default
    if not isinstance(val, str):
        return default

    s = CURRENCY_SYMBOLS.sub(' ', val)
    match = AMOUNT_TOKEN.search(s)
    if match is None:
        return default
    try:
        amount = float(match.group().replace(',', ''))
    except ValueError:
        return default
    return amount if math.isfinite(amount) else default


def parse_iso_date(value) -> date | None:
    """Parse the leading ``YYYY-MM-DD`` of *value*; ``None`` when unparsable.

    Full ISO timestamps ("2026-03-04T10:00:00Z") are accepted and truncated
    to their date.
    """
    if not value or not isinstance(value, str):
        return None
    match = ISO_DATE.match(value.strip())
    if match is None:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None
