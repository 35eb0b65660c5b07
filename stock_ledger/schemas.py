from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional
from pydantic import BaseModel, Field, field_validator


class TransactionType(str, Enum):
    PURCHASE = "purchase"
    SALE = "sale"
    DAMAGE = "damage"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"


class Product(BaseModel):
    """
    A catalog entry as stored by the data service.
    Stock levels are deliberately not range-checked: a negative stock is kept
    as-is and simply classifies as low stock.
    """

    id: str
    name: str
    sku: str
    description: Optional[str] = None
    current_stock: int = 0
    minimum_stock: int = 0
    category_id: Optional[str] = None


class Supplier(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


class Transaction(BaseModel):
    """
    One append-only ledger entry. `quantity` is always a positive magnitude;
    the direction of the movement comes from `type`.
    """

    id: str
    type: TransactionType
    product_id: str
    quantity: int = Field(..., gt=0)
    unit_price: Optional[float] = Field(default=None, ge=0)
    created_at: datetime
    notes: Optional[str] = None
    # Joined from the products table for the transaction report
    product_name: Optional[str] = None
    product_sku: Optional[str] = None

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ClassifiedProduct(Product):
    is_low_stock: bool = Field(..., alias="isLowStock")

    class Config:
        populate_by_name = True

    @property
    def status(self) -> str:
        return "Low Stock" if self.is_low_stock else "In Stock"


class StockSummary(BaseModel):
    """Headline counts for the dashboard cards."""

    total_products: int = Field(default=0, ge=0, alias="totalProducts")
    low_stock_items: int = Field(default=0, ge=0, alias="lowStockItems")
    active_suppliers: int = Field(default=0, ge=0, alias="activeSuppliers")
    monthly_transactions: int = Field(default=0, ge=0, alias="monthlyTransactions")

    class Config:
        # Build from python names, export to JSON with the dashboard's keys.
        populate_by_name = True


class TrendPoint(BaseModel):
    # The chart reads the x-axis from "name"
    label: str = Field(..., alias="name")
    value: int

    class Config:
        populate_by_name = True


class DailyMovement(BaseModel):
    date: str
    sales: int = 0
    purchases: int = 0
    damages: int = 0


class ColumnSpec(BaseModel):
    """One CSV column: its header and how to pull the value out of a row."""

    header: str
    extract: Callable[[Any], Any]


class DashboardReport(BaseModel):
    """Everything the dashboard view renders from one run."""

    as_of: datetime
    summary: StockSummary
    products: list[ClassifiedProduct]
    trend: list[TrendPoint]
    recent: list[TrendPoint]


class StockReport(BaseModel):
    """The reports view for one time range."""

    time_range: str
    window_start: datetime
    as_of: datetime
    total_products: int = 0
    low_stock: list[ClassifiedProduct] = []
    transactions: list[Transaction] = []
    movements: list[DailyMovement] = []
