"""Output formatting utilities for the scheme monitor.

Provides reusable functions for:
- Formatting rupee amounts with Indian digit grouping
- Percentages and truncated cells for report tables
- Tabular and sectioned plain-text reports (the printable report format)
"""

import math
from typing import Optional, List, Dict, Any


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's ``round()`` uses banker's rounding (``round(2.5) == 2``); report
    percentages are expected to round 2.5 up to 3.

    Examples:
        round_half_up(2.5) -> 3
        round_half_up(-2.5) -> -3
    """
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


def group_indian(digits: str) -> str:
    """Insert Indian-style separators into a string of digits.

    The last three digits form one group, every group before that has two.

    Examples:
        group_indian("120000") -> "1,20,000"
        group_indian("12345678") -> "1,23,45,678"
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_inr(value: Optional[float], precision: int = 0, prefix: str = "Rs. ") -> str:
    """Format a rupee amount for display.

    Args:
        value: Amount in rupees (None is treated as 0)
        precision: Decimal places (default: 0 for whole rupees)
        prefix: Currency prefix (default: "Rs. ")

    Returns:
        Formatted string like "Rs. 1,20,000"

    Examples:
        format_inr(120000) -> "Rs. 1,20,000"
        format_inr(-5000) -> "Rs. -5,000"
        format_inr(1500.5, precision=2) -> "Rs. 1,500.50"
    """
    if value is None:
        value = 0
    negative = value < 0
    magnitude = abs(value)
    if precision == 0:
        whole, frac = str(round_half_up(magnitude)), ""
    else:
        text = f"{magnitude:.{precision}f}"
        whole, frac = text.split(".")
        frac = "." + frac
    sign = "-" if negative and (whole.strip("0") or frac.strip(".0")) else ""
    return f"{prefix}{sign}{group_indian(whole)}{frac}"


def format_percent(value: Optional[float], precision: int = 1) -> str:
    """Format a percentage for display.

    Examples:
        format_percent(42.5) -> "42.5%"
        format_percent(None) -> "-"
    """
    if value is None:
        return "-"
    return f"{value:.{precision}f}%"


def truncate_text(text: str, max_length: int = 100, suffix: str = "...") -> str:
    """Truncate text to maximum length with ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length - len(suffix)] + suffix


class TableFormatter:
    """Formats data as aligned tabular output."""

    def __init__(self, columns: List[str], column_widths: Optional[List[int]] = None):
        """Initialize table formatter.

        Args:
            columns: List of column headers
            column_widths: Optional list of column widths (auto-calculated if None)
        """
        self.columns = columns
        self.column_widths = column_widths or [len(col) for col in columns]
        self.rows: List[List[str]] = []

    def add_row(self, values: List[Any]) -> None:
        """Add a row to the table.

        Raises:
            ValueError: If value count doesn't match column count
        """
        if len(values) != len(self.columns):
            raise ValueError(f"Expected {len(self.columns)} values, got {len(values)}")

        str_values = []
        for i, val in enumerate(values):
            str_val = str(val) if val is not None else "-"
            str_values.append(str_val)
            if len(str_val) > self.column_widths[i]:
                self.column_widths[i] = len(str_val)

        self.rows.append(str_values)

    def _format_row(self, values: List[str], is_header: bool = False) -> str:
        cells = []
        for i, val in enumerate(values):
            width = self.column_widths[i]
            if is_header:
                cells.append(val.ljust(width))
                continue
            # Numbers right-aligned, text left-aligned
            try:
                float(val)
                cells.append(val.rjust(width))
            except ValueError:
                cells.append(val.ljust(width))
        return "  ".join(cells).rstrip()

    def to_string(self, show_header: bool = True, show_separator: bool = True) -> str:
        """Format table as multi-line string."""
        lines = []
        if show_header:
            lines.append(self._format_row(self.columns, is_header=True))
            if show_separator:
                lines.append("  ".join("-" * w for w in self.column_widths))
        for row in self.rows:
            lines.append(self._format_row(row))
        return "\n".join(lines)


class ReportFormatter:
    """Formats data as a structured plain-text report with sections.

    This is the printable rendition of the monthly, constituency and
    financial reports: the download endpoint serves it as ``fmt=txt`` and
    ``main.py report`` prints it.
    """

    def __init__(self, title: str = ""):
        self.title = title
        self.sections: List[Dict[str, Any]] = []

    def add_section(self, heading: str, content: Any) -> None:
        """Add a section to the report.

        Args:
            heading: Section heading
            content: Section content (string, dict, or TableFormatter)
        """
        self.sections.append({
            "heading": heading,
            "content": content,
        })

    def _format_content(self, content: Any) -> List[str]:
        if isinstance(content, str):
            return [content]
        if isinstance(content, TableFormatter):
            return content.to_string().splitlines()
        if isinstance(content, dict):
            return [f"  {key}: {value}" for key, value in content.items()]
        return [str(content)]

    def to_string(self) -> str:
        """Format report as multi-line string."""
        lines = []

        if self.title:
            lines.append(self.title)
            lines.append("=" * len(self.title))
            lines.append("")

        for section in self.sections:
            heading = section["heading"]
            lines.append(heading)
            lines.append("-" * len(heading))

            lines.extend(self._format_content(section["content"]))
            lines.append("")

        return "\n".join(lines)
