"""
Unit tests for utils/strings.py

parse_currency is the one parser every fund total goes through, so it gets
the most attention: display strings, numbers, and junk that must become 0.
"""
import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.strings import parse_currency, parse_iso_date


class TestParseCurrency:
    @pytest.mark.parametrize("text,expected", [
        ("Rs. 1,20,000", 120000.0),
        ("Rs.1,20,000", 120000.0),
        ("₹ 1,20,000", 120000.0),
        ("₹45,000", 45000.0),
        ("INR 2,500.75", 2500.75),
        ("Rs. -5,000", -5000.0),
        ("1200", 1200.0),
        ("  80,000 ", 80000.0),
    ])
    def test_display_strings(self, text, expected):
        assert parse_currency(text) == expected

    def test_rs_dot_is_not_a_decimal_point(self):
        # "Rs. 1,20,000" must not be read as ".120000"
        assert parse_currency("Rs. 1,20,000") != 0.12

    @pytest.mark.parametrize("value", [None, "", "   ", "Rs.", "abc", "N/A", [], {}])
    def test_malformed_is_zero(self, value):
        assert parse_currency(value) == 0.0

    def test_custom_default(self):
        assert parse_currency("pending", default=-1.0) == -1.0

    def test_numbers_pass_through(self):
        assert parse_currency(120000) == 120000.0
        assert parse_currency(99.5) == 99.5

    def test_bool_is_not_a_number(self):
        assert parse_currency(True) == 0.0

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), 10 ** 400, "Rs. " + "9" * 400])
    def test_non_finite_numbers_are_default(self, value):
        assert parse_currency(value) == 0.0
        assert parse_currency(value, default=-1.0) == -1.0


class TestParseIsoDate:
    def test_plain_date(self):
        assert parse_iso_date("2026-10-19") == date(2026, 10, 19)

    def test_timestamp_truncated(self):
        assert parse_iso_date("2026-03-04T10:00:00Z") == date(2026, 3, 4)

    @pytest.mark.parametrize("value", [None, "", "19/10/2026", "2026-13-01", 20261019])
    def test_unparsable(self, value):
        assert parse_iso_date(value) is None
