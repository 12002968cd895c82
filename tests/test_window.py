"""Tests for month window navigation and range."""
from datetime import date

from monthboard.window import MonthWindow


class TestMonthWindow:

    def test_anchor_normalized_to_first_day(self):
        w = MonthWindow(date(2024, 3, 17))
        assert w.anchor == date(2024, 3, 1)

    def test_current_uses_today(self):
        w = MonthWindow.current(date(2026, 10, 19))
        assert w.start == date(2026, 10, 1)

    def test_range_inclusive(self):
        assert MonthWindow.of(2024, 3).range() == (date(2024, 3, 1), date(2024, 3, 31))
        assert MonthWindow.of(2024, 4).end == date(2024, 4, 30)

    def test_leap_february(self):
        assert MonthWindow.of(2024, 2).end == date(2024, 2, 29)
        assert MonthWindow.of(2023, 2).end == date(2023, 2, 28)

    def test_previous_and_next_cross_year(self):
        jan = MonthWindow.of(2024, 1)
        assert jan.previous() == MonthWindow.of(2023, 12)
        assert MonthWindow.of(2023, 12).next() == jan

    def test_shift_from_month_end_anchor(self):
        # Jan 31 normalizes to Jan 1, so next() lands in February
        w = MonthWindow(date(2024, 1, 31))
        assert w.next() == MonthWindow.of(2024, 2)

    def test_contains(self):
        w = MonthWindow.of(2024, 3)
        assert w.contains(date(2024, 3, 1))
        assert w.contains(date(2024, 3, 31))
        assert not w.contains(date(2024, 2, 29))
        assert not w.contains(date(2024, 4, 1))

    def test_display(self):
        assert MonthWindow.of(2024, 3).display() == "March 2024"
        assert MonthWindow.of(2025, 12).display() == "December 2025"
