"""
Category profit breakdown.

Every cart item of every bill contributes one row; rows are grouped by
category and the configured margin table turns gross sales into profit.
"""
from __future__ import annotations
from collections import defaultdict
from typing import Callable, Iterable, Mapping, Optional

from adapters.adapter_types import Bill, StoreQueryAdapter
from ..models import CategoryProfit, ProfitBreakdown
from ..window import MonthWindow
from .base import in_window


def margin_lookup(table: Mapping[str, float], default: float = 0.3) -> Callable[[str], float]:
    def lookup(category: str) -> float:
        return table.get(category, default)
    return lookup


def gross_by_category(bills: Iterable[Bill]) -> dict[str, float]:
    totals: dict[str, float] = defaultdict(float)
    for bill in bills:
        for item in bill.cart_items:
            totals[item.category] += item.line_total
    return dict(totals)


def summarize_profit(
    site: str,
    bills: Iterable[Bill],
    window: MonthWindow,
    margin_for: Callable[[str], float],
    adjustment_category: Optional[str] = "Cake",
) -> ProfitBreakdown:
    """
    Gross sales and profit per category, sorted by gross sales descending.

    The sum of manual bill adjustments is added to `adjustment_category`'s
    gross sales only (the row is created if the category didn't sell).
    Pass adjustment_category=None to leave adjustments out.
    """
    bills = in_window(bills, window, lambda b: b.date)
    gross = gross_by_category(bills)
    adjustment = sum(b.adjustment for b in bills)

    if adjustment_category and adjustment:
        gross[adjustment_category] = gross.get(adjustment_category, 0.0) + adjustment

    categories = []
    for category, amount in gross.items():
        pct = margin_for(category)
        categories.append(
            CategoryProfit(
                category=category,
                gross_sales=amount,
                profit_percent=pct,
                profit=amount * pct,
            )
        )
    categories.sort(key=lambda c: (-c.gross_sales, c.category))
    return ProfitBreakdown(site=site, categories=categories, adjustment_total=adjustment)


def aggregate_profit(
    store: StoreQueryAdapter,
    window: MonthWindow,
    margin_for: Callable[[str], float],
    adjustment_category: Optional[str] = "Cake",
) -> ProfitBreakdown:
    bills = store.query_bills(window.start, window.end)
    return summarize_profit(store.site, bills, window, margin_for, adjustment_category)
