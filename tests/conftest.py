"""
Shared fixtures: an in-memory store implementing the store query protocol.
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional

import pytest

from adapters.adapter_types import Bill, CartItem, PastSalesRecord, SalesReturn, SiteRow, StoreUnavailable
from adapters.mongo.adapter import bill_to_row
from sales_dashboard.config import DashboardConfig, SiteConfig


class FakeStore:
    """Keeps records in lists and answers inclusive range queries."""

    def __init__(self, site: str, bills=None, returns=None, past_sales=None, fail: Optional[Exception] = None):
        self.site = site
        self.bills: list[Bill] = list(bills or [])
        self.returns: list[SalesReturn] = list(returns or [])
        self.past_sales: list[PastSalesRecord] = list(past_sales or [])
        self.fail = fail
        self.calls: list[tuple[str, datetime, datetime]] = []

    def _check(self, name: str, start: datetime, end: datetime):
        self.calls.append((name, start, end))
        if self.fail is not None:
            raise self.fail

    def query_bills(self, start, end):
        self._check("bills", start, end)
        return [b for b in self.bills if start <= b.date <= end]

    def query_returns(self, start, end):
        self._check("returns", start, end)
        return [r for r in self.returns if start <= r.return_date <= end]

    def query_past_sales(self, start, end):
        self._check("past_sales", start, end)
        return [p for p in self.past_sales if start <= p.date <= end]

    def query_site_rows(self, start, end) -> list[SiteRow]:
        bills = sorted(self.query_bills(start, end), key=lambda b: b.date, reverse=True)
        return [bill_to_row(b) for b in bills]


def make_bill(when: datetime, amount: float, mode: str = "Cash", items=None, adjustment: float = 0.0) -> Bill:
    if items is None:
        items = [CartItem(name="Item", category="Cake", price=amount, quantity=1)]
    return Bill(date=when, total_amount=amount, payment_mode=mode, cart_items=items, adjustment=adjustment)


@pytest.fixture
def now():
    return datetime(2025, 8, 10, 15, 30)


@pytest.fixture
def config():
    return DashboardConfig(
        sites=[
            SiteConfig(name="Bangur Nagar", mongo_uri="mongodb://localhost/bn", target=1000.0, fixed_expense=200.0),
            SiteConfig(name="Vikhroli", mongo_uri="mongodb://localhost/vk", target=500.0, fixed_expense=100.0),
        ],
        margin_table={"Cake": 0.5, "Bread": 0.2, "Other": 0.6, "Others": 0.6},
        default_margin=0.3,
        adjustment_category="Cake",
        timezone="Asia/Kolkata",
        max_workers=4,
        prime_baseline=True,
    )
