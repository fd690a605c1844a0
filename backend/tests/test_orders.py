"""Tests for the workshop order lifecycle."""
from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from backend.app.models.audit import AuditLog
from backend.app.models.customer import Client
from backend.app.models.inventory import Product
from backend.app.models.orders import Order, OrderStatus
from backend.app.models.pos import InvoiceType, Sale
from backend.app.schemas.inventory import CartLineIn
from backend.app.schemas.orders import NewClientIn, OrderCreate
from backend.app.services.notification_service import NotificationService
from backend.app.services.orders import (
    add_payment,
    convert_to_sale,
    create_order,
    delete_order,
    set_order_status,
)
from backend.tests.conftest import RecordingEmail


def _order(
    db: Session,
    client_id: int,
    services: list[str],
    items: list[tuple[str, int]] | None = None,
) -> Order:
    return create_order(
        db,
        OrderCreate(
            client_id=client_id,
            services=services,
            items=[CartLineIn(product_id=p, quantity=q) for p, q in items or []],
            observations="Tela entregada por el cliente",
        ),
    )


# ─── TestCreateOrder ─────────────────────────────────────────────────────────


class TestCreateOrder:
    def test_total_is_services_plus_items(
        self, db: Session, products: dict[str, Product], customer: Client
    ) -> None:
        """Tapicería 4000 + Embalaje 1500 + 2 chairs at 45000 = 95500."""
        order = _order(db, customer.id, ["Tapicería", "Embalaje"], [("P-0001", 2)])
        assert order.total == Decimal("95500")
        assert order.status == OrderStatus.PLACED
        assert order.services_map == {"Tapicería": Decimal("4000"), "Embalaje": Decimal("1500")}
        assert order.payments == []
        assert order.client == "Perez, Juan"
        assert order.client_email == "juan.perez@gmail.com"

    def test_items_do_not_move_stock(
        self, db: Session, products: dict[str, Product], customer: Client
    ) -> None:
        _order(db, customer.id, ["Carpintería"], [("P-0001", 2)])
        db.expire_all()
        assert db.get(Product, "P-0001").current_stock == 12

    def test_service_required(self, db: Session, customer: Client) -> None:
        with pytest.raises(ValueError):
            create_order(db, OrderCreate.model_construct(
                client_id=customer.id, new_client=None, email=None,
                services=[], items=[], observations=None,
            ))
        assert db.query(Order).count() == 0

    def test_unknown_service_rejected(self, db: Session, customer: Client) -> None:
        with pytest.raises(ValueError, match="Soldadura"):
            _order(db, customer.id, ["Soldadura"])

    def test_client_required(self, db: Session) -> None:
        with pytest.raises(ValueError, match="client"):
            create_order(db, OrderCreate(services=["Embalaje"]))

    def test_new_client_registered(self, db: Session) -> None:
        order = create_order(
            db,
            OrderCreate(
                new_client=NewClientIn(
                    first_name="Ana", last_name="Lopez", email="ana.lopez@yahoo.com"
                ),
                services=["Carpintería"],
            ),
        )
        client = db.query(Client).one()
        assert client.notes == "Registrado desde Pedidos"
        assert order.client == "Lopez, Ana"
        assert order.client_email == "ana.lopez@yahoo.com"

    def test_new_client_requires_names(self, db: Session) -> None:
        with pytest.raises(ValueError, match="name"):
            create_order(
                db,
                OrderCreate(
                    new_client=NewClientIn(first_name=" ", last_name="Lopez"),
                    services=["Carpintería"],
                ),
            )
        assert db.query(Client).count() == 0


# ─── TestStatus ──────────────────────────────────────────────────────────────


class TestStatus:
    def test_any_transition_allowed(self, db: Session, customer: Client) -> None:
        order = _order(db, customer.id, ["Embalaje"])
        for new_status in (
            OrderStatus.READY,
            OrderStatus.PLACED,
            OrderStatus.CANCELLED,
            OrderStatus.IN_PRODUCTION,
        ):
            updated, _ = set_order_status(db, order.id, new_status)
            assert updated.status == new_status

    def test_delivered_offers_conversion(self, db: Session, customer: Client) -> None:
        order = _order(db, customer.id, ["Embalaje"])
        _, available = set_order_status(db, order.id, OrderStatus.READY)
        assert available is False
        updated, available = set_order_status(db, order.id, OrderStatus.DELIVERED)
        assert available is True
        # Setting Entregado does not convert by itself.
        assert updated.status == OrderStatus.DELIVERED
        assert db.query(Sale).count() == 0

    def test_status_change_notifies_client(
        self,
        db: Session,
        customer: Client,
        notifier: NotificationService,
        outbox: RecordingEmail,
    ) -> None:
        order = _order(db, customer.id, ["Embalaje"])
        set_order_status(db, order.id, OrderStatus.READY, notifier=notifier)
        assert outbox.sent[0]["to"] == "juan.perez@gmail.com"
        assert "Listo para Entrega" in outbox.sent[0]["body"]

    def test_unknown_order(self, db: Session) -> None:
        with pytest.raises(ValueError, match="not found"):
            set_order_status(db, 999, OrderStatus.READY)


# ─── TestPayments ────────────────────────────────────────────────────────────


class TestPayments:
    def test_partial_payments_and_overpayment(
        self, db: Session, products: dict[str, Product], customer: Client
    ) -> None:
        """355000 total: pay 150000 + 50000 -> 155000 left; + 300000 -> -145000."""
        order = _order(db, customer.id, ["Carpintería"])
        order.total = Decimal("355000")
        db.commit()

        add_payment(db, order.id, Decimal("150000"), "Efectivo")
        order = add_payment(db, order.id, Decimal("50000"), "QR")
        assert order.amount_paid == Decimal("200000")
        assert order.amount_remaining == Decimal("155000")

        order = add_payment(db, order.id, Decimal("300000"), "Transferencia")
        assert order.amount_remaining == Decimal("-145000")
        assert [p.method for p in order.payments] == ["Efectivo", "QR", "Transferencia"]

    def test_non_positive_amount_rejected(self, db: Session, customer: Client) -> None:
        order = _order(db, customer.id, ["Embalaje"])
        with pytest.raises(ValueError, match="greater than zero"):
            add_payment(db, order.id, Decimal("0"), "Efectivo")


# ─── TestConversion ──────────────────────────────────────────────────────────


class TestConversion:
    def test_conversion_is_one_way(
        self, db: Session, products: dict[str, Product], customer: Client
    ) -> None:
        order = _order(db, customer.id, ["Tapicería"], [("P-0001", 2)])
        order_id, order_total = order.id, order.total
        set_order_status(db, order_id, OrderStatus.DELIVERED)

        sale_id = convert_to_sale(db, order_id, InvoiceType.A)

        db.expire_all()
        assert db.get(Order, order_id) is None
        sales = db.query(Sale).all()
        assert len(sales) == 1
        sale = sales[0]
        assert sale.id == sale_id == 1001
        assert sale.total == order_total
        assert sale.subtotal == order_total
        assert sale.client == "Perez, Juan"
        assert sale.payment_method == "Multiple/Otro"
        assert sale.invoice_type == InvoiceType.A
        assert db.get(Product, "P-0001").current_stock == 10
        assert db.query(AuditLog).filter_by(action="ORDER_CONVERTED").count() == 1

    def test_absent_order_is_noop(self, db: Session, products: dict[str, Product]) -> None:
        assert convert_to_sale(db, 12345) is None
        assert db.query(Sale).count() == 0

    def test_second_conversion_is_noop(
        self, db: Session, products: dict[str, Product], customer: Client
    ) -> None:
        order = _order(db, customer.id, ["Embalaje"], [("P-0004", 1)])
        order_id = order.id
        convert_to_sale(db, order_id)
        assert convert_to_sale(db, order_id) is None
        db.expire_all()
        assert db.query(Sale).count() == 1
        assert db.get(Product, "P-0004").current_stock == 24

    def test_conversion_notifies_client(
        self,
        db: Session,
        products: dict[str, Product],
        customer: Client,
        notifier: NotificationService,
        outbox: RecordingEmail,
    ) -> None:
        order = _order(db, customer.id, ["Embalaje"])
        sale_id = convert_to_sale(db, order.id, notifier=notifier)
        assert outbox.sent[-1]["to"] == "juan.perez@gmail.com"
        assert f"#{sale_id}" in outbox.sent[-1]["body"]


class TestDeleteOrder:
    def test_delete_removes_order_and_children(self, db: Session, customer: Client) -> None:
        order = _order(db, customer.id, ["Embalaje"])
        add_payment(db, order.id, Decimal("1000"), "Efectivo")
        delete_order(db, order.id)
        assert db.query(Order).count() == 0

    def test_delete_unknown(self, db: Session) -> None:
        with pytest.raises(ValueError):
            delete_order(db, 999)
