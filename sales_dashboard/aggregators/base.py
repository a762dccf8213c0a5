"""
Shared helpers for the per-store aggregators.

Every aggregator works on records already fetched for one MonthWindow and
buckets them in the window's timezone.
"""
from __future__ import annotations
from collections import defaultdict
from datetime import datetime
from typing import Callable, Iterable, Mapping, TypeVar

from ..window import MonthWindow

T = TypeVar("T")


def in_window(records: Iterable[T], window: MonthWindow, when: Callable[[T], datetime]) -> list[T]:
    """Drop records outside the window (stores are trusted, but not blindly)."""
    return [r for r in records if window.contains(when(r))]


def bucket_by_day(
    records: Iterable[T],
    window: MonthWindow,
    when: Callable[[T], datetime],
    amount: Callable[[T], float],
) -> dict[int, float]:
    """Sum `amount` per day-of-month. Days without records are absent."""
    totals: dict[int, float] = defaultdict(float)
    for r in records:
        totals[window.day_of(when(r))] += amount(r)
    return dict(totals)


def fill_days(by_day: Mapping[int, float], total_days: int) -> list[float]:
    """Full-month series for days 1..total_days; missing days are zero."""
    return [float(by_day.get(day, 0.0)) for day in range(1, total_days + 1)]


def percent(part: float, whole: float) -> float:
    """part / whole * 100 rounded to 2 places; 0.0 when whole is zero."""
    if not whole:
        return 0.0
    return round(part / whole * 100, 2)
