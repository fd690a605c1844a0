"""Backup bundle: a flat JSON document keyed by collection.

Field names follow the camelCase layout of the exported file so that
bundles written by earlier versions of the application can be restored.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel

from backend.app.models.orders import OrderStatus
from backend.app.models.pos import DiscountType, InvoiceType
from backend.app.models.supplier import POStatus
from backend.app.models.user import UserRole

Money = Annotated[
    Decimal,
    Field(ge=0),
    PlainSerializer(float, return_type=float, when_used="json"),
]


class _BundleModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class UserRecord(_BundleModel):
    id: int
    username: str
    role: UserRole = UserRole.EMPLOYEE
    password: str | None = Field(default=None, exclude=True)  # plain text, hashed on import
    password_hash: str | None = None
    failed_attempts: int = Field(default=0, alias="attempts")
    blocked: bool = False


class ProductRecord(_BundleModel):
    id: str
    name: str
    category: str = "General"
    unit_price: Money = Field(alias="price")
    current_stock: int = Field(default=0, ge=0, alias="stock")
    supplier: str | None = None
    supplier_price: Money = Decimal("0")


class CartItemRecord(_BundleModel):
    product_id: str = Field(alias="id")
    name: str
    category: str | None = None
    unit_price: Money = Field(alias="price")
    supplier: str | None = None
    supplier_price: Money = Decimal("0")
    quantity: int = Field(gt=0)


class AppliedDiscountRecord(_BundleModel):
    name: str
    amount: Money


class SaleRecord(_BundleModel):
    id: int
    created_at: datetime = Field(alias="date")
    total: Money
    subtotal: Money
    client: str
    items: list[CartItemRecord]
    payment_method: str
    invoice_type: InvoiceType = Field(alias="type")
    discount_applied: AppliedDiscountRecord | None = None
    surcharge: Money = Decimal("0")


class ClientRecord(_BundleModel):
    id: int
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class SupplierRecord(_BundleModel):
    id: str
    name: str
    category: str | None = Field(default=None, alias="rubro")
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class PaymentRecord(_BundleModel):
    created_at: datetime = Field(alias="date")
    amount: Money = Field(gt=0)
    method: str


class OrderRecord(_BundleModel):
    id: int
    created_at: datetime = Field(alias="date")
    client: str
    client_email: str | None = Field(default=None, alias="email")
    status: OrderStatus
    total: Money
    services: dict[str, Money]
    items: list[CartItemRecord] = []
    observations: str | None = None
    payments: list[PaymentRecord] = []


class PurchaseOrderRecord(_BundleModel):
    id: str
    created_at: datetime = Field(alias="date")
    supplier_id: str
    status: POStatus
    items: list[CartItemRecord]
    total: Money


class DiscountRecord(_BundleModel):
    id: int
    name: str
    discount_type: DiscountType = Field(alias="type")
    value: Money
    active: bool = True


class BackupBundle(_BundleModel):
    users_list: list[UserRecord] | None = None
    products: list[ProductRecord] | None = None
    sales: list[SaleRecord] | None = None
    clients: list[ClientRecord] | None = None
    suppliers: list[SupplierRecord] | None = None
    orders: list[OrderRecord] | None = None
    purchase_orders: list[PurchaseOrderRecord] | None = None
    discounts: list[DiscountRecord] | None = None

    @model_validator(mode="after")
    def unique_ids(self) -> "BackupBundle":
        for field in type(self).model_fields:
            records = getattr(self, field)
            if records is None:
                continue
            ids = [r.id for r in records]
            if len(ids) != len(set(ids)):
                raise ValueError(f"Duplicate ids in {field}")
        return self


class BackupImportOut(BaseModel):
    replaced: dict[str, int]
