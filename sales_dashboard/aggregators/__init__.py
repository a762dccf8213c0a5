"""
Per-store aggregators.

Each aggregator takes one store and one MonthWindow and returns an
independent result; merging across stores happens in prediction.py.
"""

from .base import bucket_by_day, fill_days, percent
from .sales import aggregate_sales, summarize_sales, today_total
from .payments import aggregate_payment_modes, summarize_payment_modes
from .profit import aggregate_profit, summarize_profit, margin_lookup
from .returns import aggregate_returns, total_returns
from .history import aggregate_year_over_year, summarize_past_sales

__all__ = [
    "bucket_by_day",
    "fill_days",
    "percent",
    "aggregate_sales",
    "summarize_sales",
    "today_total",
    "aggregate_payment_modes",
    "summarize_payment_modes",
    "aggregate_profit",
    "summarize_profit",
    "margin_lookup",
    "aggregate_returns",
    "total_returns",
    "aggregate_year_over_year",
    "summarize_past_sales",
]
