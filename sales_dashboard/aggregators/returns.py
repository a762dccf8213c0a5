"""Sales returns deducted within a window."""
from __future__ import annotations
from typing import Iterable

from adapters.adapter_types import SalesReturn, StoreQueryAdapter
from ..window import MonthWindow
from .base import in_window


def total_returns(returns: Iterable[SalesReturn], window: MonthWindow) -> float:
    return sum(r.deducted_amount for r in in_window(returns, window, lambda r: r.return_date))


def aggregate_returns(store: StoreQueryAdapter, window: MonthWindow) -> float:
    return total_returns(store.query_returns(window.start, window.end), window)
