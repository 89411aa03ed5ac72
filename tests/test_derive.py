"""Tests for stocking density and date helpers."""

from datetime import date, datetime

import pytest

from grazeplan.plan.derive import (
    NO_DATE,
    add_days,
    overlaps_window,
    parse_date,
    stocking_density,
    summer_window,
    to_iso,
    to_num,
)


class TestToNum:
    """Tests for number coercion."""

    def test_numeric_text(self):
        assert to_num("3.5") == 3.5

    def test_garbage_is_zero(self):
        assert to_num("abc") == 0
        assert to_num(None) == 0
        assert to_num("") == 0

    def test_non_finite_is_zero(self):
        assert to_num(float("nan")) == 0
        assert to_num(float("inf")) == 0


class TestStockingDensity:
    """Tests for proposed ADA."""

    def test_basic_density(self):
        """(days * herd) / acres, rounded to 2 places."""
        assert stocking_density(10, 110, 156) == 7.05

    def test_zero_days_is_zero(self):
        assert stocking_density(0, 110, 156) == 0

    def test_negative_inputs_clamped(self):
        assert stocking_density(-5, 110, 156) == 0
        assert stocking_density(5, -110, 156) == 0

    def test_zero_area_uses_floor(self):
        """A zero-acre pasture never divides by zero."""
        assert stocking_density(5, 10, 0) == 50_000_000.0

    def test_text_inputs(self):
        assert stocking_density("10", "50", "100") == 5.0

    def test_exact_ties_round_up(self):
        """Ratios landing exactly on a half cent round away from zero."""
        assert stocking_density(1, 1, 8) == 0.13
        assert stocking_density(5, 1, 40) == 0.13
        assert stocking_density(3, 1, 8) == 0.38


class TestDates:
    """Tests for date parsing and offsets."""

    def test_parse_accepts_dates_and_strings(self):
        assert parse_date("2025-03-01") == date(2025, 3, 1)
        assert parse_date(date(2025, 3, 1)) == date(2025, 3, 1)
        assert parse_date(datetime(2025, 3, 1, 12, 30)) == date(2025, 3, 1)

    def test_parse_invalid(self):
        assert parse_date("not a date") is None
        assert parse_date("2025-02-30") is None
        assert parse_date(None) is None
        assert parse_date(20250301) is None

    def test_to_iso(self):
        assert to_iso("2025-03-01") == "2025-03-01"
        assert to_iso(date(2025, 3, 1)) == "2025-03-01"
        assert to_iso("garbage") == NO_DATE

    def test_add_days_crosses_month(self):
        assert add_days("2025-02-28", 1) == "2025-03-01"
        assert add_days("2024-02-28", 1) == "2024-02-29"
        assert add_days("2025-03-10", -9) == "2025-03-01"

    def test_add_days_propagates_no_date(self):
        assert add_days(NO_DATE, 5) == NO_DATE
        assert add_days("nope", 5) == NO_DATE

    def test_add_days_overflow(self):
        assert add_days("9999-12-31", 1) == NO_DATE


class TestSummerWindow:
    """Tests for the Jul 15 - Sep 15 overlap check."""

    def test_window_bounds(self):
        assert summer_window(2025) == (date(2025, 7, 15), date(2025, 9, 15))

    @pytest.mark.parametrize(
        "start,end,expected",
        [
            ("2025-07-01", "2025-07-14", False),
            ("2025-07-01", "2025-07-15", True),
            ("2025-09-15", "2025-09-20", True),
            ("2025-09-16", "2025-12-31", False),
            ("2025-08-01", "2025-08-01", True),
            ("2025-12-01", "2026-08-01", True),
            ("2025-10-01", "2026-03-01", False),
        ],
    )
    def test_overlap(self, start, end, expected):
        assert overlaps_window(start, end) is expected

    def test_invalid_dates_never_overlap(self):
        assert overlaps_window(NO_DATE, "2025-08-01") is False
        assert overlaps_window("2025-08-01", "bogus") is False

    def test_reversed_interval(self):
        assert overlaps_window("2025-08-10", "2025-08-01") is True
