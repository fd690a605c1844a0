from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.core.database import Base
from backend.app.models.inventory import CartLineSnapshot


class OrderStatus(str, enum.Enum):
    PLACED = "Encargado"
    IN_PRODUCTION = "En Producción"
    READY = "Listo para Entrega"
    DELIVERED = "Entregado"
    CANCELLED = "Cancelado"


class Order(Base):
    """Custom/workshop order: selected services, optional items, partial payments."""

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    client: Mapped[str] = mapped_column(String(255), nullable=False)
    client_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus), nullable=False, default=OrderStatus.PLACED
    )
    total: Mapped[Decimal] = mapped_column(
        Numeric(precision=20, scale=4), nullable=False, default=Decimal("0")
    )
    observations: Mapped[str | None] = mapped_column(Text, nullable=True)

    services: Mapped[list[OrderService]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderService.id",
    )
    items: Mapped[list[OrderItem]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )
    payments: Mapped[list[OrderPayment]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderPayment.id",
    )

    __table_args__ = (
        Index("ix_orders_status", "status"),
        Index("ix_orders_created_at", "created_at"),
    )

    @property
    def amount_paid(self) -> Decimal:
        return sum((Decimal(str(p.amount)) for p in self.payments), Decimal("0"))

    @property
    def amount_remaining(self) -> Decimal:
        # May go negative on overpayment.
        return Decimal(str(self.total)) - self.amount_paid

    @property
    def services_map(self) -> dict[str, Decimal]:
        return {s.name: Decimal(str(s.price)) for s in self.services}


class OrderService(Base):
    __tablename__ = "order_services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False)

    order: Mapped[Order] = relationship(back_populates="services")

    __table_args__ = (Index("ix_order_services_order", "order_id"),)


class OrderItem(CartLineSnapshot, Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), nullable=False)

    order: Mapped[Order] = relationship(back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_item_qty_positive"),
        Index("ix_order_items_order", "order_id"),
    )


class OrderPayment(Base):
    __tablename__ = "order_payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(ForeignKey("orders.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=20, scale=4), nullable=False)
    method: Mapped[str] = mapped_column(String(50), nullable=False)

    order: Mapped[Order] = relationship(back_populates="payments")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_order_payment_amount_positive"),
        Index("ix_order_payments_order", "order_id"),
    )
