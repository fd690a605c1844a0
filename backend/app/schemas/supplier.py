from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator

from backend.app.models.supplier import POStatus
from backend.app.schemas.inventory import CartLineIn, CartLineOut


# ─── Supplier ─────────────────────────────────────────────────────────────────


class SupplierCreate(BaseModel):
    name: str
    category: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class SupplierUpdate(BaseModel):
    name: str | None = None
    category: str | None = None
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class SupplierOut(BaseModel):
    id: str
    name: str
    category: str | None
    phone: str | None
    email: str | None
    address: str | None

    class Config:
        from_attributes = True


# ─── Purchase Order ───────────────────────────────────────────────────────────


class PurchaseOrderCreate(BaseModel):
    supplier_id: str
    items: list[CartLineIn]

    @field_validator("supplier_id")
    @classmethod
    def supplier_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Supplier is required")
        return v

    @field_validator("items")
    @classmethod
    def at_least_one_item(cls, v: list[CartLineIn]) -> list[CartLineIn]:
        if len(v) == 0:
            raise ValueError("Purchase order must have at least one item")
        return v


class POStatusUpdate(BaseModel):
    status: POStatus


class PurchaseOrderOut(BaseModel):
    id: str
    supplier_id: str
    status: POStatus
    total: Decimal
    created_at: datetime
    items: list[CartLineOut]

    class Config:
        from_attributes = True
