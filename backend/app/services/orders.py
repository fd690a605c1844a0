from __future__ import annotations

import logging
from decimal import Decimal

from sqlalchemy import desc
from sqlalchemy.orm import Session

from backend.app.models.customer import Client
from backend.app.models.orders import Order, OrderItem, OrderPayment, OrderService, OrderStatus
from backend.app.models.pos import CONVERSION_PAYMENT_METHOD, InvoiceType
from backend.app.schemas.orders import NewClientIn, OrderCreate
from backend.app.services.audit import log_action
from backend.app.services.inventory import LineSnapshot, snapshot_lines
from backend.app.services.notification_service import NotificationService, NotificationType
from backend.app.services.pos import notify_low_stock, persist_sale
from backend.app.services.pricing import compute_subtotal
from backend.app.services.stock_ledger import ledger_lock

logger = logging.getLogger(__name__)

SERVICES_CATALOG: dict[str, Decimal] = {
    "Carpintería": Decimal("5000"),
    "Pinturería": Decimal("3000"),
    "Embalaje": Decimal("1500"),
    "Tapicería": Decimal("4000"),
    "Herrería": Decimal("3500"),
    "Instalación": Decimal("2500"),
}

NEW_CLIENT_NOTE = "Registrado desde Pedidos"


def list_orders(db: Session, status: OrderStatus | None = None) -> list[Order]:
    query = db.query(Order)
    if status is not None:
        query = query.filter(Order.status == status)
    return query.order_by(desc(Order.id)).all()


def get_order(db: Session, order_id: int) -> Order:
    order = db.get(Order, order_id)
    if not order:
        raise ValueError(f"Order {order_id} not found")
    return order


def _register_client(db: Session, data: NewClientIn) -> Client:
    if not data.first_name.strip() or not data.last_name.strip():
        raise ValueError("First and last name are required for a new client")
    client = Client(
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        email=data.email,
        phone=data.phone,
        address=data.address,
        notes=NEW_CLIENT_NOTE,
    )
    db.add(client)
    db.flush()
    return client


def create_order(
    db: Session,
    data: OrderCreate,
    actor: str | None = None,
    ip_address: str | None = None,
) -> Order:
    """Create a workshop order in status Encargado.

    The order total is the catalogue price of every selected service plus
    the item lines at their unit price. Items are not taken out of stock
    until the order is converted into a sale.
    """
    if not data.services:
        raise ValueError("Order must include at least one service")
    unknown = [name for name in data.services if name not in SERVICES_CATALOG]
    if unknown:
        raise ValueError(f"Unknown service(s): {', '.join(unknown)}")

    snapshots = snapshot_lines(db, data.items)

    if data.new_client is not None:
        client = _register_client(db, data.new_client)
    elif data.client_id is not None:
        client = db.get(Client, data.client_id)
        if client is None:
            raise ValueError(f"Client {data.client_id} not found")
    else:
        raise ValueError("A client must be selected")

    services = {name: SERVICES_CATALOG[name] for name in data.services}
    total = sum(services.values(), Decimal("0")) + compute_subtotal(snapshots)

    order = Order(
        client=client.display_name,
        client_email=data.email or client.email,
        status=OrderStatus.PLACED,
        total=total,
        observations=data.observations,
    )
    order.services = [OrderService(name=n, price=p) for n, p in services.items()]
    order.items = [OrderItem(**s.as_columns(i)) for i, s in enumerate(snapshots)]
    db.add(order)
    db.flush()

    log_action(
        db,
        actor=actor,
        action="ORDER_CREATED",
        resource_type="orders",
        resource_id=str(order.id),
        ip_address=ip_address,
        changes={
            "client": order.client,
            "services": list(services),
            "total": str(total),
            "new_client": data.new_client is not None,
        },
    )

    db.commit()
    db.refresh(order)
    return order


def set_order_status(
    db: Session,
    order_id: int,
    new_status: OrderStatus,
    actor: str | None = None,
    ip_address: str | None = None,
    notifier: NotificationService | None = None,
) -> tuple[Order, bool]:
    """Overwrite the order status.

    Any status may follow any other. Returns the order and whether it can
    now be converted into a sale (only once it is Entregado); converting is
    a separate call.
    """
    order = get_order(db, order_id)
    old_status = order.status
    order.status = new_status

    log_action(
        db,
        actor=actor,
        action="ORDER_STATUS_UPDATED",
        resource_type="orders",
        resource_id=str(order_id),
        ip_address=ip_address,
        changes={"from": old_status.value, "to": new_status.value},
    )

    db.commit()
    db.refresh(order)

    (notifier or NotificationService()).send(
        NotificationType.ORDER_STATUS_CHANGED,
        order.client_email,
        order_id=order.id,
        client=order.client,
        status=new_status.value,
    )
    return order, new_status == OrderStatus.DELIVERED


def add_payment(
    db: Session,
    order_id: int,
    amount: Decimal,
    method: str,
    actor: str | None = None,
    ip_address: str | None = None,
) -> Order:
    """Append a partial payment. Paying more than the total is allowed."""
    if amount <= 0:
        raise ValueError("Payment amount must be greater than zero")
    order = get_order(db, order_id)
    order.payments.append(OrderPayment(amount=amount, method=method))

    log_action(
        db,
        actor=actor,
        action="ORDER_PAYMENT_ADDED",
        resource_type="orders",
        resource_id=str(order_id),
        ip_address=ip_address,
        changes={"amount": str(amount), "method": method},
    )

    db.commit()
    db.refresh(order)
    return order


def convert_to_sale(
    db: Session,
    order_id: int,
    invoice_type: InvoiceType = InvoiceType.B,
    actor: str | None = None,
    ip_address: str | None = None,
    notifier: NotificationService | None = None,
) -> int | None:
    """Turn an order into a completed sale and delete the order.

    The sale is billed at the order total, its item lines are taken out of
    stock, and the order disappears in the same transaction. Returns the new
    sale id, or None when the order does not exist.
    """
    with ledger_lock:
        order = db.get(Order, order_id)
        if order is None:
            logger.info("Conversion skipped: order %s not found", order_id)
            return None

        snapshots = [
            LineSnapshot(
                product_id=item.product_id,
                name=item.name,
                category=item.category,
                unit_price=item.unit_price,
                supplier_price=item.supplier_price,
                supplier=item.supplier,
                quantity=item.quantity,
            )
            for item in order.items
        ]
        client = order.client
        client_email = order.client_email
        total = Decimal(str(order.total))

        sale, results = persist_sale(
            db,
            snapshots=snapshots,
            client=client,
            payment_method=CONVERSION_PAYMENT_METHOD,
            invoice_type=invoice_type,
            subtotal=total,
            total=total,
            actor=actor,
            ip_address=ip_address,
        )
        sale_id = sale.id

        log_action(
            db,
            actor=actor,
            action="ORDER_CONVERTED",
            resource_type="orders",
            resource_id=str(order_id),
            ip_address=ip_address,
            changes={"sale_id": sale_id, "total": str(total)},
        )
        db.delete(order)
        db.commit()

    logger.info("Order %s converted into sale %s", order_id, sale_id)

    notifier = notifier or NotificationService()
    notifier.send(
        NotificationType.ORDER_CONVERTED,
        client_email,
        order_id=order_id,
        sale_id=sale_id,
        client=client,
        total=total,
        invoice_type=invoice_type.value,
    )
    notify_low_stock(db, results, notifier)
    return sale_id


def delete_order(
    db: Session,
    order_id: int,
    actor: str | None = None,
    ip_address: str | None = None,
) -> None:
    order = get_order(db, order_id)
    db.delete(order)
    log_action(
        db,
        actor=actor,
        action="ORDER_DELETED",
        resource_type="orders",
        resource_id=str(order_id),
        ip_address=ip_address,
    )
    db.commit()
