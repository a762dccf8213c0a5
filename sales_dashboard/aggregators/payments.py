"""Per-store totals by payment channel."""
from __future__ import annotations
from collections import defaultdict
from typing import Iterable

from adapters.adapter_types import Bill, StoreQueryAdapter
from ..models import PaymentModeTotal
from ..window import MonthWindow
from .base import in_window


def summarize_payment_modes(bills: Iterable[Bill], window: MonthWindow) -> list[PaymentModeTotal]:
    # Only modes that actually occurred get an entry
    totals: dict[str, float] = defaultdict(float)
    for b in in_window(bills, window, lambda b: b.date):
        totals[b.payment_mode] += b.total_amount
    ordered = sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
    return [PaymentModeTotal(mode=mode, amount=amount) for mode, amount in ordered]


def aggregate_payment_modes(store: StoreQueryAdapter, window: MonthWindow) -> list[PaymentModeTotal]:
    return summarize_payment_modes(store.query_bills(window.start, window.end), window)
