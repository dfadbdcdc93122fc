"""
Unit tests for utils/formatting.py

Tests the public functions: round_half_up, group_indian, format_inr,
format_percent, truncate_text, TableFormatter, ReportFormatter.
No network or file I/O required.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.formatting import (
    round_half_up,
    group_indian,
    format_inr,
    format_percent,
    truncate_text,
    TableFormatter,
    ReportFormatter,
)


# ── round_half_up ─────────────────────────────────────────────────────────────

@pytest.mark.parametrize("value,expected", [
    (2.5, 3),
    (3.5, 4),
    (2.4999, 2),
    (-2.5, -3),
    (0, 0),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


# ── group_indian / format_inr ─────────────────────────────────────────────────

@pytest.mark.parametrize("digits,expected", [
    ("0", "0"),
    ("999", "999"),
    ("1000", "1,000"),
    ("120000", "1,20,000"),
    ("12345678", "1,23,45,678"),
])
def test_group_indian(digits, expected):
    assert group_indian(digits) == expected


def test_format_inr_standard():
    assert format_inr(120000) == "Rs. 1,20,000"


def test_format_inr_none_is_zero():
    assert format_inr(None) == "Rs. 0"


def test_format_inr_negative():
    assert format_inr(-5000) == "Rs. -5,000"


def test_format_inr_rounds_to_whole_rupees():
    assert format_inr(1499.5) == "Rs. 1,500"


def test_format_inr_with_precision():
    assert format_inr(1500.5, precision=2) == "Rs. 1,500.50"


def test_format_inr_custom_prefix():
    assert format_inr(2500, prefix="₹") == "₹2,500"


# ── format_percent / truncate_text ────────────────────────────────────────────

def test_format_percent():
    assert format_percent(42.5) == "42.5%"
    assert format_percent(None) == "-"


def test_truncate_text_short_unchanged():
    assert truncate_text("Tadong", 10) == "Tadong"


def test_truncate_text_long():
    result = truncate_text("Material supply held up by landslide", 15)
    assert len(result) == 15
    assert result.endswith("...")


# ── TableFormatter ────────────────────────────────────────────────────────────

class TestTableFormatter:
    def test_header_and_rows(self):
        table = TableFormatter(["Village", "Houses"])
        table.add_row(["Tadong", 3])
        lines = table.to_string().splitlines()
        assert lines[0].startswith("Village")
        assert set(lines[1].replace(" ", "")) == {"-"}
        assert "Tadong" in lines[2]

    def test_wrong_value_count_raises(self):
        table = TableFormatter(["A", "B"])
        with pytest.raises(ValueError):
            table.add_row([1])

    def test_none_rendered_as_dash(self):
        table = TableFormatter(["A"])
        table.add_row([None])
        assert table.to_string(show_header=False) == "-"

    def test_widths_grow_to_fit(self):
        table = TableFormatter(["A"])
        table.add_row(["Chungthang"])
        assert table.column_widths == [len("Chungthang")]


# ── ReportFormatter ───────────────────────────────────────────────────────────

class TestReportFormatter:
    def test_title_underlined(self):
        text = ReportFormatter("Monthly Report").to_string()
        lines = text.splitlines()
        assert lines[0] == "Monthly Report"
        assert lines[1] == "=" * len("Monthly Report")

    def test_dict_section(self):
        report = ReportFormatter()
        report.add_section("Summary", {"total": 4, "completed": 1})
        text = report.to_string()
        assert "Summary\n-------" in text
        assert "  total: 4" in text

    def test_string_section(self):
        report = ReportFormatter()
        report.add_section("Houses", "No houses match this report.")
        assert "Houses\n------\nNo houses match this report." in report.to_string()

    def test_table_section(self):
        table = TableFormatter(["Stage", "Count"])
        table.add_row(["Completed", 1])
        report = ReportFormatter()
        report.add_section("Stages", table)
        text = report.to_string()
        assert "Stages\n------\nStage" in text
        assert "Completed" in text
