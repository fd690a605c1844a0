from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator, model_validator

from backend.app.core.config import settings
from backend.app.models.orders import OrderStatus
from backend.app.models.pos import PAYMENT_METHODS, InvoiceType
from backend.app.schemas.inventory import CartLineIn, CartLineOut


# ─── Request ──────────────────────────────────────────────────────────────────


class NewClientIn(BaseModel):
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class OrderCreate(BaseModel):
    client_id: int | None = None
    new_client: NewClientIn | None = None
    email: str | None = None  # overrides the client's stored email
    services: list[str]
    items: list[CartLineIn] = []
    observations: str | None = None

    @field_validator("services")
    @classmethod
    def at_least_one_service(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("Order must include at least one service")
        return v

    @model_validator(mode="after")
    def one_client_source(self) -> "OrderCreate":
        if self.client_id is not None and self.new_client is not None:
            raise ValueError("Provide either client_id or new_client, not both")
        return self


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderPaymentCreate(BaseModel):
    amount: Decimal
    method: str = PAYMENT_METHODS[0]

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Payment amount must be greater than zero")
        return v


class OrderConvertRequest(BaseModel):
    invoice_type: InvoiceType = InvoiceType(settings.DEFAULT_INVOICE_TYPE)


# ─── Response ─────────────────────────────────────────────────────────────────


class OrderPaymentOut(BaseModel):
    created_at: datetime
    amount: Decimal
    method: str

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: int
    created_at: datetime
    client: str
    client_email: str | None
    status: OrderStatus
    total: Decimal
    services: dict[str, Decimal] = Field(validation_alias="services_map")
    items: list[CartLineOut]
    observations: str | None
    payments: list[OrderPaymentOut]
    amount_paid: Decimal
    amount_remaining: Decimal

    class Config:
        from_attributes = True


class OrderStatusOut(BaseModel):
    order: OrderOut
    conversion_available: bool


class OrderConvertOut(BaseModel):
    converted: bool
    sale_id: int | None = None
