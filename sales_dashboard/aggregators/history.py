"""
Year-over-year history.

The comparison window is the same calendar month one year earlier, so
leap years are handled by the calendar rather than a 365-day offset.
"""
from __future__ import annotations
from typing import Iterable

from adapters.adapter_types import PastSalesRecord, StoreQueryAdapter
from ..models import YearOverYear
from ..window import MonthWindow, previous_year_window
from .base import bucket_by_day, in_window


def summarize_past_sales(site: str, records: Iterable[PastSalesRecord], prior: MonthWindow) -> YearOverYear:
    records = in_window(records, prior, lambda r: r.date)
    by_day = bucket_by_day(records, prior, lambda r: r.date, lambda r: r.sales)
    return YearOverYear(
        site=site,
        year=prior.year,
        month=prior.month,
        by_day=dict(sorted(by_day.items())),
        total=sum(by_day.values()),
    )


def aggregate_year_over_year(store: StoreQueryAdapter, window: MonthWindow) -> YearOverYear:
    prior = previous_year_window(window)
    records = store.query_past_sales(prior.start, prior.end)
    return summarize_past_sales(store.site, records, prior)
