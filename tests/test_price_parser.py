"""
Price parsing for menu price cells.

Covers:
  - dot thousands separators and decimal comma
  - currency suffixes / surrounding text
  - cells with no number parse to 0
  - ungrouped digit runs: first token only, with a warning
  - format_price / parse_price round trip
  - major -> minor unit conversion
"""

from __future__ import annotations

import logging

import pytest

from menu_ingest.parsers.price_parser import format_price, parse_price, to_minor_units


class TestParsePrice:
    def test_grouped_thousands(self):
        assert parse_price("235.000") == 235000

    def test_decimal_comma(self):
        assert parse_price("1.250,5") == 1250.5

    def test_currency_suffix(self):
        assert parse_price("45.000đ") == 45000

    def test_surrounding_text(self):
        assert parse_price("Giá: 66.000 VNĐ") == 66000

    def test_first_token_wins(self):
        assert parse_price("78.000 / 95.000") == 78000

    def test_no_number_is_zero(self):
        assert parse_price("Liên hệ") == 0

    def test_empty_is_zero(self):
        assert parse_price("") == 0
        assert parse_price(None) == 0

    def test_ungrouped_digits_read_first_token_only(self):
        assert parse_price("235000") == 235

    def test_misgrouped_digits_read_first_token_only(self):
        assert parse_price("1234.567") == 123

    def test_ungrouped_digits_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="menu_ingest.parsers.price_parser"):
            parse_price("235000")
        assert "Ungrouped price cell" in caplog.text

    def test_grouped_cell_not_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="menu_ingest.parsers.price_parser"):
            parse_price("235.000")
        assert caplog.text == ""

    def test_small_plain_number(self):
        assert parse_price("15") == 15


class TestFormatPrice:
    def test_thousands(self):
        assert format_price(235000) == "235.000"

    def test_decimal(self):
        assert format_price(1250.5) == "1.250,5"

    def test_small(self):
        assert format_price(5) == "5"

    @pytest.mark.parametrize("amount", [5, 45000, 78000, 1250.5, 1234567.25])
    def test_round_trip(self, amount):
        assert parse_price(format_price(amount)) == amount


class TestMinorUnits:
    def test_whole(self):
        assert to_minor_units(66000) == 6600000

    def test_fraction(self):
        assert to_minor_units(1250.5) == 125050

    def test_zero(self):
        assert to_minor_units(0) == 0
