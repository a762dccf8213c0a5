"""
Result models handed to the rendering layer.

Everything the dashboard shows for one request is collected in a single
DashboardResult so a page, a JSON endpoint or the CLI can render it
without calling back into the stores.
"""
from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, Field


class DaySummary(BaseModel):
    day: int = Field(ge=1, le=31)
    total_sales: float = 0.0


class SalesSummary(BaseModel):
    site: str
    today_sales: float = 0.0
    month_total: float = 0.0
    daily_sales: list[DaySummary] = Field(default_factory=list)


class PaymentModeTotal(BaseModel):
    mode: str
    amount: float


class CategoryProfit(BaseModel):
    category: str
    gross_sales: float
    profit_percent: float
    profit: float


class ProfitBreakdown(BaseModel):
    site: str
    categories: list[CategoryProfit] = Field(default_factory=list)
    adjustment_total: float = 0.0      # may be negative

    @property
    def gross_sales(self) -> float:
        return sum(c.gross_sales for c in self.categories)

    @property
    def gross_profit(self) -> float:
        return sum(c.profit for c in self.categories)


class YearOverYear(BaseModel):
    site: str
    year: int
    month: int
    by_day: dict[int, float] = Field(default_factory=dict)
    total: float = 0.0


class Projection(BaseModel):
    label: str
    month_total: float
    days_passed: int
    total_days: int
    target: float
    average: Optional[float] = None     # None: no elapsed days, no run-rate
    predicted: Optional[float] = None
    status: str = "unavailable"         # "on track" | "behind" | "unavailable"

    @property
    def available(self) -> bool:
        return self.predicted is not None


class NetProfit(BaseModel):
    site: str
    gross_profit: float
    fixed_expense: float
    returns_deducted: float
    net_profit: float                   # may be negative
    net_percent: float


class MergedDay(BaseModel):
    day: int
    by_site: dict[str, float]
    total: float


class MergedSales(BaseModel):
    days: list[MergedDay]
    today_by_site: dict[str, float]
    today_total: float
    month_by_site: dict[str, float]
    month_total: float


class MergedPaymentMode(BaseModel):
    mode: str
    by_site: dict[str, float]
    total: float


class YearOverYearComparison(BaseModel):
    current_year: int
    previous_year: int
    month: int
    current: list[float]
    previous: list[float]
    current_total: float
    previous_total: float
    growth_percent: Optional[float] = None


class DashboardResult(BaseModel):
    month: str
    year: int
    month_number: int
    total_days: int
    days_passed: int
    generated_at: str
    sites: list[str]
    summaries: list[SalesSummary]
    merged: MergedSales
    payment_modes: dict[str, list[PaymentModeTotal]]
    merged_payment_modes: list[MergedPaymentMode]
    profit: list[ProfitBreakdown]
    returns: dict[str, float]
    net_profit: list[NetProfit]
    projections: list[Projection]
    combined_projection: Projection
    year_over_year: list[YearOverYear]
    year_over_year_comparison: YearOverYearComparison


class AlertEvent(BaseModel):
    site: str
    items: list[str]
    amount: float
    time: str
    payment_mode: str = ""
