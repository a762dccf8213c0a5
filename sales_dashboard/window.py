"""
Month window resolution.

Turns an optional "YYYY-MM" selector into inclusive start/end instants for
range queries. The current time is always passed in so the functions stay
deterministic under test.
"""
from __future__ import annotations
import calendar
from dataclasses import dataclass
from datetime import datetime, time, tzinfo
from typing import Optional


class InvalidMonthSelector(ValueError):
    """Raised when a month selector is not a valid "YYYY-MM" value."""
    pass


@dataclass(frozen=True)
class MonthWindow:
    year: int
    month: int                  # 1-indexed
    start: datetime             # first instant of day 1
    end: datetime               # last instant of the last day
    total_days: int

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def tz(self) -> Optional[tzinfo]:
        return self.start.tzinfo

    def contains(self, instant: datetime) -> bool:
        return self.start <= self.localize(instant) <= self.end

    def localize(self, instant: datetime) -> datetime:
        """Express a stored instant in the window's timezone (naive instants are local already)."""
        return localize(instant, self.tz)

    def day_of(self, instant: datetime) -> int:
        return self.localize(instant).day


def localize(instant: datetime, tz: Optional[tzinfo]) -> datetime:
    if tz is None:
        return instant.replace(tzinfo=None) if instant.tzinfo else instant
    if instant.tzinfo is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def month_window(year: int, month: int, tz: Optional[tzinfo] = None) -> MonthWindow:
    if not 1 <= month <= 12:
        raise InvalidMonthSelector(f"Month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise InvalidMonthSelector(f"Year out of range: {year}")
    total_days = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=tz)
    end = datetime.combine(start.replace(day=total_days).date(), time.max, tzinfo=tz)
    return MonthWindow(year=year, month=month, start=start, end=end, total_days=total_days)


def parse_month_selector(selector: str) -> tuple[int, int]:
    parts = selector.strip().split("-")
    if len(parts) != 2:
        raise InvalidMonthSelector(f"Expected YYYY-MM, got {selector!r}")
    try:
        year, month = int(parts[0]), int(parts[1])
    except ValueError as e:
        raise InvalidMonthSelector(f"Expected YYYY-MM, got {selector!r}") from e
    return year, month


def resolve_month(selector: Optional[str], now: datetime) -> MonthWindow:
    """
    Resolve a month selector into a MonthWindow.

    Args:
        selector: "YYYY-MM" or None/blank for the month containing `now`
        now: current instant; its tzinfo becomes the window's timezone

    Raises:
        InvalidMonthSelector: if the selector can't be parsed or the month is out of range
    """
    if selector is None or not selector.strip():
        return month_window(now.year, now.month, now.tzinfo)
    year, month = parse_month_selector(selector)
    return month_window(year, month, now.tzinfo)


def previous_year_window(window: MonthWindow) -> MonthWindow:
    """Same calendar month one year earlier (Feb 2024 has 29 days, Feb 2023 has 28)."""
    return month_window(window.year - 1, window.month, window.tz)


def today_bounds(now: datetime) -> tuple[datetime, datetime]:
    start = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
    end = datetime.combine(now.date(), time.max, tzinfo=now.tzinfo)
    return start, end


def days_passed(window: MonthWindow, now: datetime) -> int:
    """
    Elapsed days of the window as of `now` (the real current time).

    0 for a future month, now.day for the current month, the full day
    count for a past month.
    """
    current = (now.year, now.month)
    viewed = (window.year, window.month)
    if viewed > current:
        return 0
    if viewed == current:
        return now.day
    return window.total_days
