"""
Tests for month window resolution.
"""
from datetime import datetime, time
from zoneinfo import ZoneInfo

import pytest

from sales_dashboard.window import (
    InvalidMonthSelector,
    days_passed,
    month_window,
    previous_year_window,
    resolve_month,
    today_bounds,
)


class TestResolveMonth:
    """Tests for turning a selector into a MonthWindow."""

    def test_no_selector_uses_current_month(self, now):
        window = resolve_month(None, now)
        assert (window.year, window.month) == (2025, 8)
        assert window.total_days == 31

    def test_blank_selector_uses_current_month(self, now):
        assert resolve_month("  ", now).key == "2025-08"

    def test_bounds_cover_whole_month(self, now):
        window = resolve_month("2025-02", now)
        assert window.start == datetime(2025, 2, 1, 0, 0)
        assert window.end == datetime.combine(datetime(2025, 2, 28).date(), time.max)
        assert window.total_days == 28

    def test_leap_february(self, now):
        assert resolve_month("2024-02", now).total_days == 29

    def test_window_takes_timezone_from_now(self):
        tz = ZoneInfo("Asia/Kolkata")
        window = resolve_month("2025-08", datetime(2025, 8, 10, tzinfo=tz))
        assert window.start.tzinfo is tz
        assert window.end.tzinfo is tz

    @pytest.mark.parametrize("selector", ["2025-13", "2025-00", "abcd-ef", "2025/08", "2025-08-01", "2025"])
    def test_invalid_selectors(self, selector, now):
        with pytest.raises(InvalidMonthSelector):
            resolve_month(selector, now)

    def test_invalid_selector_is_value_error(self, now):
        with pytest.raises(ValueError):
            resolve_month("August", now)

    def test_contains_is_inclusive(self, now):
        window = resolve_month("2025-08", now)
        assert window.contains(window.start)
        assert window.contains(window.end)
        assert not window.contains(datetime(2025, 9, 1))

    def test_day_of_uses_window_timezone(self):
        tz = ZoneInfo("Asia/Kolkata")
        window = resolve_month("2025-08", datetime(2025, 8, 10, tzinfo=tz))
        # 20:00 UTC on the 9th is 01:30 on the 10th in Kolkata
        assert window.day_of(datetime(2025, 8, 9, 20, 0, tzinfo=ZoneInfo("UTC"))) == 10
        assert window.day_of(datetime(2025, 8, 31, 23, 59)) == 31


class TestPreviousYear:
    """Tests for the year-over-year window shift."""

    def test_same_month_one_year_earlier(self):
        prior = previous_year_window(month_window(2025, 8))
        assert prior.start == datetime(2024, 8, 1)
        assert prior.end.date() == datetime(2024, 8, 31).date()

    def test_march_across_leap_year(self):
        prior = previous_year_window(month_window(2025, 3))
        assert prior.start == datetime(2024, 3, 1)
        assert prior.end.date() == datetime(2024, 3, 31).date()
        assert prior.total_days == 31

    def test_leap_february_shifts_to_28_days(self):
        prior = previous_year_window(month_window(2024, 2))
        assert prior.total_days == 28
        assert prior.end.date() == datetime(2023, 2, 28).date()


class TestDaysPassed:
    """Tests for elapsed-day counting."""

    def test_current_month_uses_today(self, now):
        assert days_passed(month_window(2025, 8), now) == 10

    def test_past_month_is_complete(self, now):
        assert days_passed(month_window(2025, 6), now) == 30
        assert days_passed(month_window(2024, 12), now) == 31

    def test_future_month_is_zero(self, now):
        assert days_passed(month_window(2025, 9), now) == 0
        assert days_passed(month_window(2026, 1), now) == 0


def test_today_bounds(now):
    start, end = today_bounds(now)
    assert start == datetime(2025, 8, 10, 0, 0)
    assert end.date() == now.date()
    assert end.time() == time.max
