"""Per-store daily sales summary."""
from __future__ import annotations
from datetime import datetime
from typing import Iterable

from loguru import logger

from adapters.adapter_types import Bill, StoreQueryAdapter
from ..models import DaySummary, SalesSummary
from ..window import MonthWindow, localize, today_bounds
from .base import bucket_by_day, in_window


def today_total(bills: Iterable[Bill], now: datetime) -> float:
    """Sum of bills dated within the calendar day containing `now`."""
    start, end = today_bounds(now)
    return sum(b.total_amount for b in bills if start <= localize(b.date, now.tzinfo) <= end)


def summarize_sales(site: str, bills: Iterable[Bill], window: MonthWindow, now: datetime) -> SalesSummary:
    """
    Build a SalesSummary from one store's bills.

    Day bucketing and today-membership are computed separately over the
    same records; today's figure is zero when the window doesn't contain
    today.
    """
    bills = in_window(bills, window, lambda b: b.date)
    by_day = bucket_by_day(bills, window, lambda b: b.date, lambda b: b.total_amount)
    daily = [DaySummary(day=day, total_sales=by_day[day]) for day in sorted(by_day)]
    return SalesSummary(
        site=site,
        today_sales=today_total(bills, localize(now, window.tz)),
        month_total=sum(d.total_sales for d in daily),
        daily_sales=daily,
    )


def aggregate_sales(store: StoreQueryAdapter, window: MonthWindow, now: datetime) -> SalesSummary:
    bills = store.query_bills(window.start, window.end)
    logger.debug(f"{store.site}: {len(bills)} bills in {window.key}")
    return summarize_sales(store.site, bills, window, now)
