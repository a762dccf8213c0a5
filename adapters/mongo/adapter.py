from __future__ import annotations
from datetime import datetime
from typing import TYPE_CHECKING

from loguru import logger
from pydantic import ValidationError

from adapters.adapter_types import Bill, PastSalesRecord, SalesReturn, SiteRow, StoreUnavailable
from .client import MongoStoreClient

if TYPE_CHECKING:
    from sales_dashboard.config import DashboardConfig, SiteConfig

BILLS = "bills"
RETURNS = "returns"
PAST_SALES = "pastsales"

BILL_FIELDS = {"_id": 0, "date": 1, "totalAmount": 1, "cartItems": 1, "paymentMode": 1, "adjustment": 1}
RETURN_FIELDS = {"_id": 0, "returnDate": 1, "deductedAmount": 1}
PAST_SALES_FIELDS = {"_id": 0, "date": 1, "sales": 1}

ROW_TIME_FORMAT = "%I:%M %p"


def _range(start: datetime, end: datetime) -> dict:
    return {"$gte": start, "$lte": end}


class MongoStoreAdapter:
    """StoreQueryAdapter over one site's MongoDB point-of-sale database."""

    def __init__(self, site: str, client: MongoStoreClient):
        self.site = site
        self.client = client

    @classmethod
    def from_site(cls, site: "SiteConfig", config: "DashboardConfig") -> "MongoStoreAdapter":
        client = MongoStoreClient(
            site.name,
            site.mongo_uri,
            timezone=config.timezone,
            timeout_ms=config.store_timeout_ms,
            retry_attempts=config.retry_attempts,
        )
        return cls(site.name, client)

    def _parse(self, model, docs: list[dict]) -> list:
        try:
            return [model.model_validate(d) for d in docs]
        except ValidationError as e:
            logger.error(f"{self.site}: malformed {model.__name__} document: {e}")
            raise StoreUnavailable(self.site, f"malformed {model.__name__} document") from e

    def query_bills(self, start: datetime, end: datetime) -> list[Bill]:
        docs = self.client.find(BILLS, {"date": _range(start, end)}, BILL_FIELDS)
        return self._parse(Bill, docs)

    def query_returns(self, start: datetime, end: datetime) -> list[SalesReturn]:
        docs = self.client.find(RETURNS, {"returnDate": _range(start, end)}, RETURN_FIELDS)
        return self._parse(SalesReturn, docs)

    def query_past_sales(self, start: datetime, end: datetime) -> list[PastSalesRecord]:
        docs = self.client.find(PAST_SALES, {"date": _range(start, end)}, PAST_SALES_FIELDS)
        return self._parse(PastSalesRecord, docs)

    def query_site_rows(self, start: datetime, end: datetime) -> list[SiteRow]:
        """Bills in range as live rows, newest first."""
        docs = self.client.find(
            BILLS, {"date": _range(start, end)}, BILL_FIELDS, sort=[("date", -1)]
        )
        return [bill_to_row(b) for b in self._parse(Bill, docs)]

    def ping(self) -> dict:
        return self.client.ping()

    def close(self):
        self.client.close()


def bill_to_row(bill: Bill) -> SiteRow:
    return SiteRow(
        time=bill.date.strftime(ROW_TIME_FORMAT),
        items=[item.name for item in bill.cart_items if item.name],
        amount=bill.total_amount,
        payment_mode=bill.payment_mode,
    )
