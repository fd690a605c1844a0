from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator


class ProductCreate(BaseModel):
    id: str | None = None  # generated as P-NNNN when omitted
    name: str
    category: str = "General"
    unit_price: Decimal
    supplier_price: Decimal = Decimal("0")
    current_stock: int = 0
    supplier: str | None = None

    @field_validator("unit_price", "supplier_price")
    @classmethod
    def price_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price must be non-negative")
        return v

    @field_validator("current_stock")
    @classmethod
    def stock_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Stock must be non-negative")
        return v


class ProductUpdate(BaseModel):
    name: str | None = None
    category: str | None = None
    unit_price: Decimal | None = None
    supplier_price: Decimal | None = None
    supplier: str | None = None
    # NOTE: no current_stock here. Stock changes go
    # through the stock ledger (sales, purchase orders, adjustments).

    @field_validator("unit_price", "supplier_price")
    @classmethod
    def price_non_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Price must be non-negative")
        return v


class ProductOut(BaseModel):
    id: str
    name: str
    category: str
    unit_price: Decimal
    supplier_price: Decimal
    current_stock: int
    supplier: str | None

    class Config:
        from_attributes = True


class StockAdjustmentCreate(BaseModel):
    quantity: int  # positive = add, negative = remove (floored at zero)
    notes: str | None = None

    @field_validator("quantity")
    @classmethod
    def quantity_non_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("Quantity must not be zero")
        return v


class CartLineIn(BaseModel):
    """A product reference plus quantity.

    Snapshot fields may be omitted when the product exists; they are then
    copied from the product directory at the time of the call.
    """

    product_id: str
    quantity: int
    name: str | None = None
    category: str | None = None
    unit_price: Decimal | None = None
    supplier_price: Decimal | None = None
    supplier: str | None = None

    @field_validator("quantity")
    @classmethod
    def quantity_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Quantity must be greater than zero")
        return v

    @field_validator("unit_price", "supplier_price")
    @classmethod
    def price_non_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Price must be non-negative")
        return v


class CartLineOut(BaseModel):
    product_id: str
    name: str
    category: str | None
    unit_price: Decimal
    supplier_price: Decimal
    supplier: str | None
    quantity: int

    class Config:
        from_attributes = True


class LowStockOut(BaseModel):
    id: str
    name: str
    current_stock: int


class DailySalesOut(BaseModel):
    date: str
    total: Decimal


class DashboardOut(BaseModel):
    sales_today: Decimal
    low_stock: list[LowStockOut]
    active_orders: int
    stock_value: Decimal
    last_7_days: list[DailySalesOut]
    generated_at: datetime
