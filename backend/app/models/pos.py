from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.core.database import Base
from backend.app.models.inventory import CartLineSnapshot

PAYMENT_METHODS = ["Efectivo", "QR", "Transferencia", "Débito", "Crédito"]
CONVERSION_PAYMENT_METHOD = "Multiple/Otro"


class InvoiceType(str, enum.Enum):
    A = "A"
    B = "B"
    X = "X"


class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class Discount(Base):
    __tablename__ = "discounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    discount_type: Mapped[DiscountType] = mapped_column(
        Enum(DiscountType), nullable=False
    )
    value: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (Index("ix_discounts_active", "active"),)


class Sale(Base):
    """A completed point-of-sale transaction.

    `id` is assigned by the sale processor, never by the database: 1001
    for an empty table, otherwise the highest stored id + 1 (which can be
    below 1001 after restoring a backup).
    """

    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    subtotal: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False)
    client: Mapped[str] = mapped_column(String(255), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    invoice_type: Mapped[InvoiceType] = mapped_column(Enum(InvoiceType), nullable=False)
    discount_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    discount_amount: Mapped[Decimal | None] = mapped_column(
        Numeric(precision=20, scale=4), nullable=True
    )
    surcharge: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=4), nullable=False, default=Decimal("0")
    )

    lines: Mapped[list[SaleLine]] = relationship(
        back_populates="sale",
        cascade="all, delete-orphan",
        order_by="SaleLine.position",
    )

    __table_args__ = (
        CheckConstraint("total >= 0", name="ck_sale_total_non_negative"),
        CheckConstraint("surcharge >= 0", name="ck_sale_surcharge_non_negative"),
        Index("ix_sales_created_at", "created_at"),
        Index("ix_sales_client", "client"),
    )

    @property
    def discount_applied(self) -> dict[str, object] | None:
        if self.discount_name is None:
            return None
        return {"name": self.discount_name, "amount": self.discount_amount}


class SaleLine(CartLineSnapshot, Base):
    __tablename__ = "sale_lines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sale_id: Mapped[int] = mapped_column(ForeignKey("sales.id"), nullable=False)

    sale: Mapped[Sale] = relationship(back_populates="lines")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_sale_line_qty_positive"),
        Index("ix_sale_lines_sale", "sale_id"),
        Index("ix_sale_lines_product", "product_id"),
    )
