"""Shared utilities for the scheme monitor."""

# Pattern definitions
from utils.patterns import AMOUNT_TOKEN, CURRENCY_SYMBOLS, ISO_DATE, SHEET_TITLE_FORBIDDEN

# String utilities
from utils.strings import parse_currency, parse_iso_date

# Caching
from utils.cache import TTLCache

# Output formatting
from utils.formatting import (
    round_half_up,
    group_indian,
    format_inr,
    format_percent,
    truncate_text,
    TableFormatter,
    ReportFormatter,
)

# Configuration
from utils.config import Config, KnownValues, AppConfig

__all__ = [
    # Patterns
    "AMOUNT_TOKEN",
    "CURRENCY_SYMBOLS",
    "ISO_DATE",
    "SHEET_TITLE_FORBIDDEN",
    # Strings
    "parse_currency",
    "parse_iso_date",
    # Cache
    "TTLCache",
    # Formatting
    "round_half_up",
    "group_indian",
    "format_inr",
    "format_percent",
    "truncate_text",
    "TableFormatter",
    "ReportFormatter",
    # Config
    "Config",
    "KnownValues",
    "AppConfig",
]
