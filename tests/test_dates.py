"""
tests/test_dates.py
~~~~~~~~~~~~~~~~~~~
Tests for haulbook.dates — month keys, windows and display formatting.
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from haulbook.dates import (
    current_month,
    format_date,
    is_month_key,
    last_months,
    month_key,
    month_label,
    month_options,
    parse_date,
    shift_month,
)


class TestParseDate:
    def test_iso_string(self):
        assert parse_date("2024-03-15") == date(2024, 3, 15)

    def test_iso_with_time(self):
        assert parse_date("2024-03-15T10:20:00.000Z") == date(2024, 3, 15)

    def test_datetime(self):
        assert parse_date(datetime(2024, 3, 15, 8, 0)) == date(2024, 3, 15)

    @pytest.mark.parametrize("raw", [None, "", "  ", "15/03/2024", "2024-13-01", 42])
    def test_unparseable(self, raw):
        assert parse_date(raw) is None


class TestMonthKeys:
    def test_month_key(self):
        assert month_key(date(2024, 3, 15)) == "2024-03"

    def test_current_month(self):
        assert current_month(date(2024, 3, 15)) == "2024-03"
        assert current_month(datetime(2024, 3, 15, 23, 59)) == "2024-03"

    @pytest.mark.parametrize("key, n, expected", [
        ("2024-03", -1, "2024-02"),
        ("2024-01", -1, "2023-12"),
        ("2024-12", 1, "2025-01"),
        ("2024-03", -15, "2022-12"),
        ("2024-03", 0, "2024-03"),
    ])
    def test_shift_month(self, key, n, expected):
        assert shift_month(key, n) == expected

    def test_last_months_crosses_year(self):
        assert last_months(4, date(2024, 2, 10)) == ["2023-11", "2023-12", "2024-01", "2024-02"]

    def test_last_months_from_month_end(self):
        # 31 March minus one month is February, not a skipped month
        assert last_months(2, date(2024, 3, 31)) == ["2024-02", "2024-03"]

    def test_label(self):
        assert month_label("2024-03") == "March 2024"
        assert month_label("2023-12") == "December 2023"

    @pytest.mark.parametrize("value, ok", [
        ("2024-03", True), ("2024-13", False), ("2024-3", False), ("march", False), ("2024-03-01", False),
    ])
    def test_is_month_key(self, value, ok):
        assert is_month_key(value) is ok


class TestMonthOptions:
    def test_twelve_by_default(self):
        opts = month_options(today=date(2024, 3, 15))
        assert len(opts) == 12
        assert opts[-1] == ("2024-03", "March 2024")
        assert opts[0] == ("2023-04", "April 2023")

    def test_custom_count(self):
        assert [k for k, _ in month_options(2, date(2024, 1, 1))] == ["2023-12", "2024-01"]


class TestFormatDate:
    def test_day_month_year(self):
        assert format_date(date(2024, 3, 5)) == "05/03/2024"

    def test_none(self):
        assert format_date(None) == ""
