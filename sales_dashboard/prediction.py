"""
Cross-store merging and month-end projection.

Takes the per-store aggregator outputs for one window and derives:
- the merged day series (every day of the month present, missing = 0)
- run-rate projections against the site targets
- net profit after fixed expenses and returns
- merged payment modes and the year-over-year comparison series
"""
from __future__ import annotations
from datetime import datetime
from typing import Mapping, Sequence

from .aggregators.base import fill_days, percent
from .models import (
    MergedDay,
    MergedPaymentMode,
    MergedSales,
    NetProfit,
    PaymentModeTotal,
    ProfitBreakdown,
    Projection,
    SalesSummary,
    YearOverYear,
    YearOverYearComparison,
)
from .window import MonthWindow, days_passed

ON_TRACK = "on track"
BEHIND = "behind"
UNAVAILABLE = "unavailable"


def daily_series(summary: SalesSummary, total_days: int) -> list[float]:
    return fill_days({d.day: d.total_sales for d in summary.daily_sales}, total_days)


def merge_daily_series(summaries: Sequence[SalesSummary], total_days: int) -> list[MergedDay]:
    """One entry per day 1..total_days with each site's amount and the day total."""
    series = {s.site: daily_series(s, total_days) for s in summaries}
    merged = []
    for i in range(total_days):
        by_site = {site: values[i] for site, values in series.items()}
        merged.append(MergedDay(day=i + 1, by_site=by_site, total=sum(by_site.values())))
    return merged


def merge_sales(summaries: Sequence[SalesSummary], window: MonthWindow) -> MergedSales:
    today_by_site = {s.site: s.today_sales for s in summaries}
    month_by_site = {s.site: s.month_total for s in summaries}
    return MergedSales(
        days=merge_daily_series(summaries, window.total_days),
        today_by_site=today_by_site,
        today_total=sum(today_by_site.values()),
        month_by_site=month_by_site,
        month_total=sum(month_by_site.values()),
    )


def project(label: str, month_total: float, elapsed: int, total_days: int, target: float) -> Projection:
    """
    Run-rate projection of a month total.

    With no elapsed days there is no run-rate: average and predicted stay
    None and the status is "unavailable".
    """
    projection = Projection(
        label=label,
        month_total=month_total,
        days_passed=elapsed,
        total_days=total_days,
        target=target,
    )
    if elapsed <= 0:
        return projection

    average = month_total / elapsed
    # A completed month predicts exactly what it sold
    predicted = month_total if elapsed >= total_days else average * total_days
    projection.average = average
    projection.predicted = predicted
    projection.status = ON_TRACK if predicted >= target else BEHIND
    return projection


def project_site(summary: SalesSummary, window: MonthWindow, now: datetime, target: float) -> Projection:
    return project(summary.site, summary.month_total, days_passed(window, now), window.total_days, target)


def project_combined(
    merged: MergedSales,
    window: MonthWindow,
    now: datetime,
    target: float,
    label: str = "Total",
) -> Projection:
    return project(label, merged.month_total, days_passed(window, now), window.total_days, target)


def net_profit(breakdown: ProfitBreakdown, fixed_expense: float, returns_deducted: float) -> NetProfit:
    """gross profit - fixed expense - returns; net percent is 0 when gross profit is 0."""
    gross = breakdown.gross_profit
    net = gross - fixed_expense - returns_deducted
    return NetProfit(
        site=breakdown.site,
        gross_profit=gross,
        fixed_expense=fixed_expense,
        returns_deducted=returns_deducted,
        net_profit=net,
        net_percent=percent(net, gross),
    )


def merge_payment_modes(by_site: Mapping[str, Sequence[PaymentModeTotal]]) -> list[MergedPaymentMode]:
    """A mode missing from one store counts as zero for that store."""
    sites = list(by_site)
    modes: dict[str, dict[str, float]] = {}
    for site, totals in by_site.items():
        for t in totals:
            modes.setdefault(t.mode, {s: 0.0 for s in sites})[site] += t.amount

    merged = [
        MergedPaymentMode(mode=mode, by_site=amounts, total=sum(amounts.values()))
        for mode, amounts in modes.items()
    ]
    merged.sort(key=lambda m: (-m.total, m.mode))
    return merged


def compare_year_over_year(
    merged: MergedSales,
    history: Sequence[YearOverYear],
    window: MonthWindow,
) -> YearOverYearComparison:
    """
    Current combined daily series against last year's on the same day template.

    Prior-year days beyond this month's length (29 Feb) fall outside the
    template but still count in the prior total.
    """
    previous_by_day: dict[int, float] = {}
    for h in history:
        for day, amount in h.by_day.items():
            previous_by_day[day] = previous_by_day.get(day, 0.0) + amount

    previous_total = sum(h.total for h in history)
    growth = None
    if previous_total:
        growth = round((merged.month_total - previous_total) / previous_total * 100, 2)

    return YearOverYearComparison(
        current_year=window.year,
        previous_year=window.year - 1,
        month=window.month,
        current=[d.total for d in merged.days],
        previous=fill_days(previous_by_day, window.total_days),
        current_total=merged.month_total,
        previous_total=previous_total,
        growth_percent=growth,
    )
