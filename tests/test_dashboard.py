"""
Tests for the dashboard orchestration (in-memory stores).
"""
import json
from datetime import datetime

import pytest

from adapters.adapter_types import CartItem, PastSalesRecord, SalesReturn, StoreUnavailable
from sales_dashboard.dashboard import DashboardService
from sales_dashboard.window import InvalidMonthSelector
from tests.conftest import FakeStore, make_bill


@pytest.fixture
def stores():
    bangur = FakeStore(
        "Bangur Nagar",
        bills=[
            make_bill(datetime(2025, 8, 1, 10), 300, "Cash"),
            make_bill(datetime(2025, 8, 10, 12), 100, "UPI", adjustment=-10),
        ],
        returns=[SalesReturn(return_date=datetime(2025, 8, 5, 10), deducted_amount=20)],
        past_sales=[PastSalesRecord(date=datetime(2024, 8, 1, 12), sales=200)],
    )
    vikhroli = FakeStore(
        "Vikhroli",
        bills=[
            make_bill(datetime(2025, 8, 2, 10), 100, "UPI", items=[
                CartItem(name="Loaf", category="Bread", price=50, quantity=2),
            ]),
        ],
    )
    return {"Bangur Nagar": bangur, "Vikhroli": vikhroli}


class TestDashboardService:
    """Tests for DashboardService.build."""

    def test_build_current_month(self, stores, config, now):
        service = DashboardService(stores, config, clock=lambda: now)
        result = service.build()

        assert result.month == "2025-08"
        assert result.days_passed == 10
        assert result.sites == ["Bangur Nagar", "Vikhroli"]
        assert len(result.merged.days) == 31
        assert result.merged.days[0].total == 300
        assert result.merged.days[1].by_site == {"Bangur Nagar": 0, "Vikhroli": 100}
        assert result.merged.today_total == 100
        assert result.merged.month_total == 500

    def test_projections(self, stores, config, now):
        result = DashboardService(stores, config).build("2025-08", now=now)
        bangur, vikhroli = result.projections
        assert bangur.average == 40
        assert bangur.predicted == 1240
        assert bangur.status == "on track"
        assert vikhroli.predicted == 310
        assert vikhroli.status == "behind"
        assert result.combined_projection.target == 1500
        assert result.combined_projection.predicted == 1550

    def test_net_profit_with_adjustment_and_returns(self, stores, config, now):
        result = DashboardService(stores, config).build("2025-08", now=now)
        bangur_profit = result.profit[0]
        assert bangur_profit.categories[0].category == "Cake"
        assert bangur_profit.categories[0].gross_sales == 390
        bangur_net, vikhroli_net = result.net_profit
        assert bangur_net.gross_profit == 195
        assert bangur_net.returns_deducted == 20
        assert bangur_net.net_profit == -25
        assert vikhroli_net.gross_profit == pytest.approx(20)
        assert result.returns == {"Bangur Nagar": 20, "Vikhroli": 0}

    def test_payment_modes(self, stores, config, now):
        result = DashboardService(stores, config).build("2025-08", now=now)
        assert [m.mode for m in result.payment_modes["Vikhroli"]] == ["UPI"]
        assert result.merged_payment_modes[0].mode == "Cash"
        assert result.merged_payment_modes[1].by_site == {"Bangur Nagar": 100, "Vikhroli": 100}

    def test_year_over_year(self, stores, config, now):
        result = DashboardService(stores, config).build("2025-08", now=now)
        assert result.year_over_year[0].total == 200
        assert result.year_over_year_comparison.previous[0] == 200
        assert result.year_over_year_comparison.growth_percent == 150.0

    def test_future_month_has_no_projection(self, stores, config, now):
        result = DashboardService(stores, config).build("2025-12", now=now)
        assert result.days_passed == 0
        assert all(p.predicted is None for p in result.projections)
        assert result.merged.month_total == 0

    def test_result_serialises(self, stores, config, now):
        result = DashboardService(stores, config).build("2025-08", now=now)
        data = json.loads(result.model_dump_json())
        assert data["month"] == "2025-08"
        assert len(data["merged"]["days"]) == 31
        assert data["combined_projection"]["status"] == "on track"

    def test_invalid_month(self, stores, config, now):
        with pytest.raises(InvalidMonthSelector):
            DashboardService(stores, config).build("2025-14", now=now)

    def test_store_failure_fails_dashboard(self, stores, config, now):
        stores["Vikhroli"].fail = StoreUnavailable("Vikhroli", "timed out")
        with pytest.raises(StoreUnavailable) as exc:
            DashboardService(stores, config).build("2025-08", now=now)
        assert exc.value.site == "Vikhroli"

    def test_unexpected_store_error_propagates(self, stores, config, now):
        stores["Bangur Nagar"].fail = ConnectionResetError("reset")
        with pytest.raises(ConnectionResetError):
            DashboardService(stores, config).build("2025-08", now=now)

    def test_bills_fetched_once_per_store(self, stores, config, now):
        DashboardService(stores, config).build("2025-08", now=now)
        for store in stores.values():
            assert [c[0] for c in store.calls].count("bills") == 1
            assert [c[0] for c in store.calls].count("returns") == 1

    def test_missing_store_rejected(self, stores, config):
        with pytest.raises(ValueError):
            DashboardService({"Vikhroli": stores["Vikhroli"]}, config)

    def test_stores_as_sequence(self, stores, config, now):
        service = DashboardService(list(stores.values()), config)
        assert set(service.stores) == {"Bangur Nagar", "Vikhroli"}

    def test_close_closes_stores(self, stores, config):
        closed = []
        for store in stores.values():
            store.close = lambda site=store.site: closed.append(site)
        with DashboardService(stores, config):
            pass
        assert sorted(closed) == ["Bangur Nagar", "Vikhroli"]


@pytest.mark.parametrize("month, total_days", [
    ("2025-02", 28),
    ("2024-02", 29),
    ("2025-04", 30),
    ("2025-08", 31),
])
def test_sparse_month_totals_match_day_series(config, now, month, total_days):
    year, number = map(int, month.split("-"))
    stores = {
        "Bangur Nagar": FakeStore("Bangur Nagar", bills=[
            make_bill(datetime(year, number, 1, 9), 120),
            make_bill(datetime(year, number, total_days, 23, 30), 80.5),
        ]),
        "Vikhroli": FakeStore("Vikhroli", bills=[
            make_bill(datetime(year, number, 15, 13), 45),
        ]),
    }
    result = DashboardService(stores, config).build(month, now=now)

    assert result.total_days == total_days
    assert [d.day for d in result.merged.days] == list(range(1, total_days + 1))
    for summary in result.summaries:
        assert summary.month_total == sum(d.total_sales for d in summary.daily_sales)
    assert result.merged.month_total == pytest.approx(sum(d.total for d in result.merged.days))
    assert result.merged.month_total == pytest.approx(245.5)
    assert result.merged.days[-1].by_site == {"Bangur Nagar": 80.5, "Vikhroli": 0}
