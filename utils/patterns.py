"""Pre-compiled regex patterns for the scheme monitor.

All patterns are compiled once at module import.

Usage:
    from utils.patterns import AMOUNT_TOKEN

    match = AMOUNT_TOKEN.search("Rs. 1,20,000")
"""

import re

# Currency symbols and prefixes seen in fund strings ("Rs.", "INR", "₹")
CURRENCY_SYMBOLS = re.compile(r'(?:rs\.?|inr|[\$€£¥₹])', re.IGNORECASE)

# First numeric token in a formatted amount: "Rs. -1,20,000.50" -> "-1,20,000.50"
# The optional minus must sit directly before the digits.
AMOUNT_TOKEN = re.compile(r'-?\d[\d,]*(?:\.\d+)?')

# ISO calendar date as written by the stores: 2026-10-19
ISO_DATE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})')

# Characters Excel refuses in a worksheet title
SHEET_TITLE_FORBIDDEN = re.compile(r'[\\/*?:\[\]]')
