"""
Request-scoped dashboard orchestration.

Provides:
- Fan-out of every store query on a thread pool (bills are fetched once
  per store and shared by the sales, payment and profit summaries)
- One join barrier per query group (a group is merged only when all
  stores answered; one failed store fails the whole dashboard)
- Assembly of the DashboardResult handed to the rendering layer
"""
from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime
from typing import Callable, Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

from loguru import logger

from adapters.adapter_types import StoreQueryAdapter, StoreUnavailable
from .aggregators import (
    aggregate_returns,
    aggregate_year_over_year,
    summarize_payment_modes,
    summarize_profit,
    summarize_sales,
)
from .config import DashboardConfig
from .models import DashboardResult
from .prediction import (
    compare_year_over_year,
    merge_payment_modes,
    merge_sales,
    net_profit,
    project_combined,
    project_site,
)
from .window import MonthWindow, days_passed, resolve_month


class DashboardService:
    """
    Builds the dashboard for a month across all configured sites.

    Usage:
        with DashboardService.from_config(config) as service:
            result = service.build("2025-08")
    """

    QUERY_GROUPS = ("bills", "returns", "history")

    def __init__(
        self,
        stores: Mapping[str, StoreQueryAdapter] | Sequence[StoreQueryAdapter],
        config: Optional[DashboardConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.config = config or DashboardConfig.from_env()
        if isinstance(stores, Mapping):
            self.stores = dict(stores)
        else:
            self.stores = {s.site: s for s in stores}
        missing = [name for name in self.config.site_names if name not in self.stores]
        if missing:
            raise ValueError(f"No store configured for site(s): {', '.join(missing)}")
        self.tz = ZoneInfo(self.config.timezone)
        self._clock = clock or (lambda: datetime.now(self.tz))

    @classmethod
    def from_config(cls, config: Optional[DashboardConfig] = None) -> "DashboardService":
        from adapters.mongo.adapter import MongoStoreAdapter

        config = config or DashboardConfig.from_env()
        stores = {s.name: MongoStoreAdapter.from_site(s, config) for s in config.sites}
        return cls(stores, config)

    @property
    def sites(self) -> list[str]:
        return self.config.site_names

    def now(self) -> datetime:
        return self._clock()

    def _submit_all(self, executor: ThreadPoolExecutor, window: MonthWindow):
        # Bills are fetched once per store and shared by the sales, payment
        # and profit summaries
        jobs = {
            "bills": lambda store: list(store.query_bills(window.start, window.end)),
            "returns": lambda store: aggregate_returns(store, window),
            "history": lambda store: aggregate_year_over_year(store, window),
        }
        return {
            group: {site: executor.submit(job, self.stores[site]) for site in self.sites}
            for group, job in jobs.items()
        }

    def _join(self, group: str, futures: Mapping[str, Future]) -> dict:
        """Wait for every store's answer for one query group; any failure fails the group."""
        results = {}
        for site, future in futures.items():
            try:
                results[site] = future.result()
            except StoreUnavailable:
                logger.error(f"{group}: store for {site} unavailable")
                raise
        return results

    def build(self, month: Optional[str] = None, now: Optional[datetime] = None) -> DashboardResult:
        """
        Build the dashboard for `month` ("YYYY-MM", default: current month).

        Raises:
            InvalidMonthSelector: if `month` is malformed
            StoreUnavailable: if any store query fails
        """
        now = now or self.now()
        window = resolve_month(month, now)
        logger.info(f"Building dashboard for {window.key} ({', '.join(self.sites)})")

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            pending = self._submit_all(executor, window)
            try:
                results = {group: self._join(group, pending[group]) for group in self.QUERY_GROUPS}
            except BaseException:
                for futures in pending.values():
                    for f in futures.values():
                        f.cancel()
                raise

        bills = results["bills"]
        summaries = [summarize_sales(site, bills[site], window, now) for site in self.sites]
        payments = {site: summarize_payment_modes(bills[site], window) for site in self.sites}
        profit = [
            summarize_profit(
                site,
                bills[site],
                window,
                self.config.margin_for,
                self.config.adjustment_category,
            )
            for site in self.sites
        ]
        merged = merge_sales(summaries, window)

        projections = [
            project_site(summary, window, now, self.config.site(summary.site).target)
            for summary in summaries
        ]
        combined = project_combined(merged, window, now, sum(s.target for s in self.config.sites))

        net = [
            net_profit(
                breakdown,
                self.config.site(breakdown.site).fixed_expense,
                results["returns"][breakdown.site],
            )
            for breakdown in profit
        ]

        history = [results["history"][site] for site in self.sites]

        result = DashboardResult(
            month=window.key,
            year=window.year,
            month_number=window.month,
            total_days=window.total_days,
            days_passed=days_passed(window, now),
            generated_at=now.isoformat(),
            sites=self.sites,
            summaries=summaries,
            merged=merged,
            payment_modes=payments,
            merged_payment_modes=merge_payment_modes(payments),
            profit=profit,
            returns=results["returns"],
            net_profit=net,
            projections=projections,
            combined_projection=combined,
            year_over_year=history,
            year_over_year_comparison=compare_year_over_year(merged, history, window),
        )
        logger.info(
            f"Dashboard {window.key}: month total {merged.month_total:,.2f}, "
            f"today {merged.today_total:,.2f}"
        )
        return result

    def close(self):
        """Close all store connections."""
        for store in self.stores.values():
            close = getattr(store, "close", None)
            if close:
                close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
