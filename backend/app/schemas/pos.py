from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator

from backend.app.core.config import settings
from backend.app.models.pos import PAYMENT_METHODS, DiscountType, InvoiceType
from backend.app.schemas.inventory import CartLineIn, CartLineOut


# ─── Discounts ───────────────────────────────────────────────────────────────


class DiscountCreate(BaseModel):
    name: str
    discount_type: DiscountType
    value: Decimal
    active: bool = True

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be empty")
        return v

    @field_validator("value")
    @classmethod
    def value_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Discount value must be non-negative")
        return v


class DiscountUpdate(BaseModel):
    name: str | None = None
    discount_type: DiscountType | None = None
    value: Decimal | None = None
    active: bool | None = None

    @field_validator("value")
    @classmethod
    def value_non_negative(cls, v: Decimal | None) -> Decimal | None:
        if v is not None and v < 0:
            raise ValueError("Discount value must be non-negative")
        return v


class DiscountOut(BaseModel):
    id: int
    name: str
    discount_type: DiscountType
    value: Decimal
    active: bool

    class Config:
        from_attributes = True


# ─── Sale request ────────────────────────────────────────────────────────────


class SaleRequest(BaseModel):
    items: list[CartLineIn]
    client_id: int | None = None
    payment_method: str = PAYMENT_METHODS[0]
    invoice_type: InvoiceType = InvoiceType(settings.DEFAULT_INVOICE_TYPE)
    discount_id: int | None = None
    surcharge_type: DiscountType = DiscountType.PERCENTAGE
    surcharge_value: Decimal = Decimal("0")

    @field_validator("items")
    @classmethod
    def at_least_one_item(cls, v: list[CartLineIn]) -> list[CartLineIn]:
        if not v:
            raise ValueError("Cart must contain at least one item")
        return v

    @field_validator("payment_method")
    @classmethod
    def known_payment_method(cls, v: str) -> str:
        if v not in PAYMENT_METHODS:
            raise ValueError(f"Payment method must be one of: {', '.join(PAYMENT_METHODS)}")
        return v

    @field_validator("surcharge_value")
    @classmethod
    def surcharge_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Surcharge must be non-negative")
        return v


# ─── Response ─────────────────────────────────────────────────────────────────


class AppliedDiscountOut(BaseModel):
    name: str
    amount: Decimal


class SaleOut(BaseModel):
    id: int
    created_at: datetime
    subtotal: Decimal
    total: Decimal
    client: str
    payment_method: str
    invoice_type: InvoiceType
    discount_applied: AppliedDiscountOut | None = None
    surcharge: Decimal
    lines: list[CartLineOut]

    class Config:
        from_attributes = True


class SaleHistoryOut(BaseModel):
    id: int
    created_at: datetime
    client: str
    payment_method: str
    invoice_type: InvoiceType
    item_count: int
    total: Decimal
