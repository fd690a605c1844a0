"""Full-data export and restore.

Export writes every collection into one camelCase JSON bundle. Import
validates the whole bundle first, then replaces each collection present in
it wholesale inside a single transaction; collections the bundle does not
mention are left untouched. Any parse, validation or integrity failure
aborts the import with nothing replaced.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.security import get_password_hash
from backend.app.models.customer import Client
from backend.app.models.inventory import Product
from backend.app.models.orders import Order, OrderItem, OrderPayment, OrderService
from backend.app.models.pos import Discount, Sale, SaleLine
from backend.app.models.supplier import PurchaseOrder, PurchaseOrderItem, Supplier
from backend.app.models.user import UserAccount
from backend.app.schemas.backup import (
    AppliedDiscountRecord,
    BackupBundle,
    CartItemRecord,
    ClientRecord,
    DiscountRecord,
    OrderRecord,
    PaymentRecord,
    ProductRecord,
    PurchaseOrderRecord,
    SaleRecord,
    SupplierRecord,
    UserRecord,
)
from backend.app.services.audit import log_action
from backend.app.services.stock_ledger import ledger_lock

logger = logging.getLogger(__name__)


class BackupImportError(ValueError):
    """The backup payload could not be parsed, validated or stored."""


# ─── Export ───────────────────────────────────────────────────────────────────


def _cart_items(lines: list[Any]) -> list[CartItemRecord]:
    return [
        CartItemRecord(
            product_id=line.product_id,
            name=line.name,
            category=line.category,
            unit_price=line.unit_price,
            supplier=line.supplier,
            supplier_price=line.supplier_price,
            quantity=line.quantity,
        )
        for line in lines
    ]


def build_bundle(db: Session) -> BackupBundle:
    return BackupBundle(
        users_list=[
            UserRecord(
                id=u.id,
                username=u.username,
                role=u.role,
                password_hash=u.hashed_password,
                failed_attempts=u.failed_attempts,
                blocked=u.blocked,
            )
            for u in db.query(UserAccount).order_by(UserAccount.id)
        ],
        products=[
            ProductRecord(
                id=p.id,
                name=p.name,
                category=p.category,
                unit_price=p.unit_price,
                current_stock=p.current_stock,
                supplier=p.supplier,
                supplier_price=p.supplier_price,
            )
            for p in db.query(Product).order_by(Product.id)
        ],
        sales=[
            SaleRecord(
                id=s.id,
                created_at=s.created_at,
                total=s.total,
                subtotal=s.subtotal,
                client=s.client,
                items=_cart_items(s.lines),
                payment_method=s.payment_method,
                invoice_type=s.invoice_type,
                discount_applied=(
                    AppliedDiscountRecord(**s.discount_applied)
                    if s.discount_applied is not None
                    else None
                ),
                surcharge=s.surcharge,
            )
            for s in db.query(Sale).order_by(Sale.id)
        ],
        clients=[
            ClientRecord(
                id=c.id,
                first_name=c.first_name,
                last_name=c.last_name,
                email=c.email,
                phone=c.phone,
                address=c.address,
                notes=c.notes,
            )
            for c in db.query(Client).order_by(Client.id)
        ],
        suppliers=[
            SupplierRecord(
                id=s.id,
                name=s.name,
                category=s.category,
                phone=s.phone,
                email=s.email,
                address=s.address,
            )
            for s in db.query(Supplier).order_by(Supplier.id)
        ],
        orders=[
            OrderRecord(
                id=o.id,
                created_at=o.created_at,
                client=o.client,
                client_email=o.client_email,
                status=o.status,
                total=o.total,
                services=o.services_map,
                items=_cart_items(o.items),
                observations=o.observations,
                payments=[
                    PaymentRecord(created_at=p.created_at, amount=p.amount, method=p.method)
                    for p in o.payments
                ],
            )
            for o in db.query(Order).order_by(Order.id)
        ],
        purchase_orders=[
            PurchaseOrderRecord(
                id=po.id,
                created_at=po.created_at,
                supplier_id=po.supplier_id,
                status=po.status,
                items=_cart_items(po.items),
                total=po.total,
            )
            for po in db.query(PurchaseOrder).order_by(PurchaseOrder.id)
        ],
        discounts=[
            DiscountRecord(
                id=d.id,
                name=d.name,
                discount_type=d.discount_type,
                value=d.value,
                active=d.active,
            )
            for d in db.query(Discount).order_by(Discount.id)
        ],
    )


def export_data(db: Session) -> dict[str, Any]:
    """JSON-ready backup bundle of every collection."""
    return build_bundle(db).model_dump(mode="json", by_alias=True)


# ─── Import ───────────────────────────────────────────────────────────────────


def parse_bundle(raw: str | bytes | dict[str, Any]) -> BackupBundle:
    try:
        if isinstance(raw, dict):
            return BackupBundle.model_validate(raw)
        return BackupBundle.model_validate_json(raw)
    except ValidationError as e:
        raise BackupImportError(f"Invalid backup file: {e.error_count()} error(s)") from e


def _line_columns(item: CartItemRecord, position: int) -> dict[str, Any]:
    return {**item.model_dump(), "position": position}


def _replace_users(db: Session, records: list[UserRecord]) -> None:
    db.query(UserAccount).delete()
    for r in records:
        hashed = get_password_hash(r.password) if r.password else r.password_hash
        db.add(UserAccount(
            id=r.id,
            username=r.username,
            role=r.role,
            hashed_password=hashed,
            failed_attempts=r.failed_attempts,
            blocked=r.blocked,
        ))


def _replace_products(db: Session, records: list[ProductRecord]) -> None:
    db.query(Product).delete()
    db.add_all(Product(**r.model_dump()) for r in records)


def _replace_sales(db: Session, records: list[SaleRecord]) -> None:
    db.query(SaleLine).delete()
    db.query(Sale).delete()
    for r in records:
        sale = Sale(
            id=r.id,
            created_at=r.created_at,
            subtotal=r.subtotal,
            total=r.total,
            client=r.client,
            payment_method=r.payment_method,
            invoice_type=r.invoice_type,
            discount_name=r.discount_applied.name if r.discount_applied else None,
            discount_amount=r.discount_applied.amount if r.discount_applied else None,
            surcharge=r.surcharge,
        )
        sale.lines = [SaleLine(**_line_columns(item, i)) for i, item in enumerate(r.items)]
        db.add(sale)


def _replace_clients(db: Session, records: list[ClientRecord]) -> None:
    db.query(Client).delete()
    db.add_all(Client(**r.model_dump()) for r in records)


def _replace_suppliers(db: Session, records: list[SupplierRecord]) -> None:
    db.query(Supplier).delete()
    db.add_all(Supplier(**r.model_dump()) for r in records)


def _replace_orders(db: Session, records: list[OrderRecord]) -> None:
    db.query(OrderPayment).delete()
    db.query(OrderItem).delete()
    db.query(OrderService).delete()
    db.query(Order).delete()
    for r in records:
        order = Order(
            id=r.id,
            created_at=r.created_at,
            client=r.client,
            client_email=r.client_email,
            status=r.status,
            total=r.total,
            observations=r.observations,
        )
        order.services = [OrderService(name=n, price=p) for n, p in r.services.items()]
        order.items = [OrderItem(**_line_columns(item, i)) for i, item in enumerate(r.items)]
        order.payments = [
            OrderPayment(created_at=p.created_at, amount=p.amount, method=p.method)
            for p in r.payments
        ]
        db.add(order)


def _replace_purchase_orders(db: Session, records: list[PurchaseOrderRecord]) -> None:
    db.query(PurchaseOrderItem).delete()
    db.query(PurchaseOrder).delete()
    for r in records:
        po = PurchaseOrder(
            id=r.id,
            created_at=r.created_at,
            supplier_id=r.supplier_id,
            status=r.status,
            total=r.total,
        )
        po.items = [
            PurchaseOrderItem(**_line_columns(item, i)) for i, item in enumerate(r.items)
        ]
        db.add(po)


def _replace_discounts(db: Session, records: list[DiscountRecord]) -> None:
    db.query(Discount).delete()
    db.add_all(Discount(**r.model_dump()) for r in records)


_REPLACERS = {
    "users_list": _replace_users,
    "products": _replace_products,
    "sales": _replace_sales,
    "clients": _replace_clients,
    "suppliers": _replace_suppliers,
    "orders": _replace_orders,
    "purchase_orders": _replace_purchase_orders,
    "discounts": _replace_discounts,
}


def import_data(
    db: Session,
    raw: str | bytes | dict[str, Any],
    actor: str | None = None,
    ip_address: str | None = None,
) -> dict[str, int]:
    """Restore a backup bundle and return the record count per replaced collection.

    Raises BackupImportError if the payload is malformed or cannot be stored;
    the database is then left exactly as it was.
    """
    bundle = parse_bundle(raw)

    replaced: dict[str, int] = {}
    with ledger_lock:
        try:
            for field, replace in _REPLACERS.items():
                records = getattr(bundle, field)
                if records is None:
                    continue
                replace(db, records)
                replaced[field] = len(records)
            db.flush()
        except IntegrityError as e:
            db.rollback()
            raise BackupImportError(f"Backup data is inconsistent: {e.orig}") from e
        except (SQLAlchemyError, OverflowError) as e:
            db.rollback()
            raise BackupImportError(f"Backup could not be stored: {e}") from e

        log_action(
            db,
            actor=actor,
            action="BACKUP_IMPORTED",
            resource_type="backup",
            resource_id="bundle",
            ip_address=ip_address,
            changes=replaced,
        )
        db.commit()

    logger.info("Backup imported: %s", replaced)
    return replaced
