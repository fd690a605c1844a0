from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal

from sqlalchemy import func as sa_func
from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.models.customer import WALK_IN_CLIENT, Client
from backend.app.models.pos import Discount, DiscountType, InvoiceType, Sale, SaleLine
from backend.app.schemas.inventory import CartLineIn
from backend.app.services.audit import log_action
from backend.app.services.inventory import LineSnapshot, snapshot_lines
from backend.app.services.notification_service import NotificationService, NotificationType
from backend.app.services.pricing import ZERO, price_cart
from backend.app.services.stock_ledger import (
    LineResult,
    StockDirection,
    StockLedger,
    ledger_lock,
)

logger = logging.getLogger(__name__)

FIRST_SALE_ID = 1001


def _next_sale_id(db: Session) -> int:
    current = db.query(sa_func.max(Sale.id)).scalar()
    return FIRST_SALE_ID if current is None else current + 1


def _resolve_client(db: Session, client_id: int | None) -> tuple[str, str | None]:
    """Display name and email for *client_id*; unknown ids are walk-in sales."""
    if client_id is None:
        raise ValueError("A client must be selected")
    client = db.get(Client, client_id)
    if client is None:
        return WALK_IN_CLIENT, None
    return client.display_name, client.email


def _active_discount(db: Session, discount_id: int | None) -> Discount | None:
    if discount_id is None:
        return None
    discount = db.get(Discount, discount_id)
    if discount is None:
        raise ValueError(f"Discount {discount_id} not found")
    if not discount.active:
        raise ValueError(f"Discount '{discount.name}' is not active")
    return discount


def persist_sale(
    db: Session,
    *,
    snapshots: list[LineSnapshot],
    client: str,
    payment_method: str,
    invoice_type: InvoiceType,
    subtotal: Decimal,
    total: Decimal,
    discount: Discount | None = None,
    discount_amount: Decimal = ZERO,
    surcharge: Decimal = ZERO,
    actor: str | None = None,
    ip_address: str | None = None,
) -> tuple[Sale, list[LineResult]]:
    """Append a Sale and decrement stock for its lines. Does not commit.

    Must be called while holding ``ledger_lock`` so that the id read here
    is still the maximum when the caller commits.
    """
    sale = Sale(
        id=_next_sale_id(db),
        subtotal=subtotal,
        total=total,
        client=client,
        payment_method=payment_method,
        invoice_type=invoice_type,
        discount_name=discount.name if discount is not None else None,
        discount_amount=discount_amount if discount is not None else None,
        surcharge=surcharge,
    )
    sale.lines = [SaleLine(**s.as_columns(i)) for i, s in enumerate(snapshots)]
    db.add(sale)
    db.flush()

    # Stock follows the requested quantities; oversell floors at zero.
    results = StockLedger(db).apply_batch(snapshots, StockDirection.DECREMENT)

    log_action(
        db,
        actor=actor,
        action="SALE_COMPLETED",
        resource_type="sales",
        resource_id=str(sale.id),
        ip_address=ip_address,
        changes={
            "client": client,
            "payment_method": payment_method,
            "invoice_type": invoice_type.value,
            "subtotal": str(subtotal),
            "total": str(total),
            "items": [
                {"product_id": r.product_id, "quantity": r.quantity, "outcome": r.outcome.value}
                for r in results
            ],
        },
    )
    return sale, results


def record_sale(
    db: Session,
    *,
    lines: list[CartLineIn],
    client_id: int | None,
    payment_method: str,
    invoice_type: InvoiceType = InvoiceType.B,
    discount_id: int | None = None,
    surcharge_type: DiscountType = DiscountType.PERCENTAGE,
    surcharge_value: Decimal = ZERO,
    actor: str | None = None,
    ip_address: str | None = None,
    notifier: NotificationService | None = None,
) -> int:
    """Record a point-of-sale transaction and return its id.

    The cart is priced with the selected discount and surcharge, the sale is
    stored with frozen copies of its lines, and every line's quantity is
    taken out of stock. Sale and stock change are committed together.
    """
    if not lines:
        raise ValueError("Cart must contain at least one item")

    with ledger_lock:
        client, client_email = _resolve_client(db, client_id)
        discount = _active_discount(db, discount_id)
        snapshots = snapshot_lines(db, lines)
        breakdown = price_cart(snapshots, discount, surcharge_type, surcharge_value)

        sale, results = persist_sale(
            db,
            snapshots=snapshots,
            client=client,
            payment_method=payment_method,
            invoice_type=invoice_type,
            subtotal=breakdown.subtotal,
            total=breakdown.total,
            discount=discount,
            discount_amount=breakdown.discount_amount,
            surcharge=breakdown.surcharge_amount,
            actor=actor,
            ip_address=ip_address,
        )
        db.commit()
        sale_id = sale.id

    logger.info("Sale %s recorded for %s: total %s", sale_id, client, breakdown.total)

    notifier = notifier or NotificationService()
    notifier.send(
        NotificationType.SALE_RECORDED,
        client_email,
        sale_id=sale_id,
        total=breakdown.total,
    )
    notify_low_stock(db, results, notifier)
    return sale_id


def notify_low_stock(
    db: Session,
    results: Iterable[LineResult],
    notifier: NotificationService,
) -> None:
    """Alert the owner about products left at or below the threshold."""
    seen: set[str] = set()
    for result in results:
        if not result.applied or result.product_id in seen:
            continue
        seen.add(result.product_id)
        product = StockLedger(db).lookup(result.product_id)
        if product is not None and product.current_stock <= settings.LOW_STOCK_THRESHOLD:
            notifier.low_stock(product.id, product.name, product.current_stock)
