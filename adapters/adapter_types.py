from __future__ import annotations
from datetime import datetime
from typing import Protocol, Sequence
from pydantic import BaseModel, Field, field_validator


class StoreUnavailable(RuntimeError):
    """Raised when a store query fails or times out."""

    def __init__(self, site: str, message: str):
        super().__init__(f"{site}: {message}")
        self.site = site


# Not in any margin table, so the default margin applies
UNCATEGORIZED = "Uncategorized"


class CartItem(BaseModel):
    name: str = ""
    category: str = UNCATEGORIZED
    price: float = 0.0
    quantity: float = 0.0

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def _missing_number_is_zero(cls, v):
        # $sum in the POS aggregation treated missing values as zero
        return 0.0 if v is None or v == "" else v

    @field_validator("name", "category", mode="before")
    @classmethod
    def _blank_text(cls, v, info):
        if v is None or (isinstance(v, str) and not v.strip()):
            return UNCATEGORIZED if info.field_name == "category" else ""
        return str(v).strip()

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Bill(BaseModel):
    date: datetime
    total_amount: float = Field(default=0.0, alias="totalAmount", ge=0)
    cart_items: list[CartItem] = Field(default_factory=list, alias="cartItems")
    payment_mode: str = Field(default="Unknown", alias="paymentMode")
    adjustment: float = 0.0              # signed manual correction

    model_config = {"populate_by_name": True}

    @field_validator("total_amount", "adjustment", mode="before")
    @classmethod
    def _missing_amount_is_zero(cls, v):
        return 0.0 if v is None or v == "" else v

    @field_validator("payment_mode", mode="before")
    @classmethod
    def _blank_mode(cls, v):
        return v or "Unknown"


class SalesReturn(BaseModel):
    return_date: datetime = Field(alias="returnDate")
    deducted_amount: float = Field(default=0.0, alias="deductedAmount", ge=0)

    model_config = {"populate_by_name": True}


class PastSalesRecord(BaseModel):
    date: datetime
    sales: float = Field(default=0.0, ge=0)


class SiteRow(BaseModel):
    """One row of a site's live bill list, as compared by the change detector."""
    time: str
    items: list[str] = Field(default_factory=list)
    amount: float
    payment_mode: str = ""

    @property
    def identity(self) -> tuple[str, float]:
        return (self.time, round(self.amount, 2))


class StoreQueryAdapter(Protocol):
    """Read side of one site's store. All ranges are inclusive."""
    site: str

    def query_bills(self, start: datetime, end: datetime) -> Sequence[Bill]: ...
    def query_returns(self, start: datetime, end: datetime) -> Sequence[SalesReturn]: ...
    def query_past_sales(self, start: datetime, end: datetime) -> Sequence[PastSalesRecord]: ...
