from __future__ import annotations

import logging
import time

from sqlalchemy.orm import Session, selectinload

from backend.app.models.supplier import POStatus, PurchaseOrder, PurchaseOrderItem, Supplier
from backend.app.schemas.inventory import CartLineIn
from backend.app.services.audit import log_action
from backend.app.services.inventory import snapshot_lines
from backend.app.services.pricing import compute_subtotal
from backend.app.services.stock_ledger import StockDirection, StockLedger, ledger_lock

logger = logging.getLogger(__name__)


def _next_po_id(db: Session) -> str:
    stamp = int(time.time() * 1000)
    while db.get(PurchaseOrder, f"OC-{stamp}") is not None:
        stamp += 1
    return f"OC-{stamp}"


def list_purchase_orders(db: Session, status: POStatus | None = None) -> list[PurchaseOrder]:
    query = db.query(PurchaseOrder).options(selectinload(PurchaseOrder.items))
    if status is not None:
        query = query.filter(PurchaseOrder.status == status)
    return query.order_by(PurchaseOrder.created_at.desc(), PurchaseOrder.id.desc()).all()


def get_purchase_order(db: Session, po_id: str) -> PurchaseOrder:
    po = db.get(PurchaseOrder, po_id)
    if not po:
        raise ValueError(f"Purchase order {po_id} not found")
    return po


def create_purchase_order(
    db: Session,
    supplier_id: str,
    lines: list[CartLineIn],
    actor: str | None = None,
    ip_address: str | None = None,
) -> PurchaseOrder:
    """Create a Pendiente purchase order valued at supplier prices."""
    if not supplier_id or not supplier_id.strip():
        raise ValueError("Supplier is required")
    if not lines:
        raise ValueError("Purchase order must have at least one item")
    if db.get(Supplier, supplier_id) is None:
        raise ValueError(f"Supplier {supplier_id} not found")

    snapshots = snapshot_lines(db, lines, price_field="supplier_price")
    total = compute_subtotal(snapshots, price_attr="supplier_price")

    po = PurchaseOrder(
        id=_next_po_id(db),
        supplier_id=supplier_id,
        status=POStatus.PENDING,
        total=total,
    )
    po.items = [PurchaseOrderItem(**s.as_columns(i)) for i, s in enumerate(snapshots)]
    db.add(po)

    log_action(
        db,
        actor=actor,
        action="PO_CREATED",
        resource_type="purchase_orders",
        resource_id=po.id,
        ip_address=ip_address,
        changes={"supplier_id": supplier_id, "total": str(total), "lines": len(snapshots)},
    )

    db.commit()
    db.refresh(po)
    return po


def set_po_status(
    db: Session,
    po_id: str,
    new_status: POStatus,
    actor: str | None = None,
    ip_address: str | None = None,
) -> PurchaseOrder:
    """Overwrite the purchase-order status.

    Moving into Recibida from any other status adds every line's quantity to
    stock. Setting Recibida on an order that is already Recibida changes
    nothing, so repeated calls never double the stock.
    """
    with ledger_lock:
        po = get_purchase_order(db, po_id)
        old_status = po.status

        if new_status == POStatus.RECEIVED and old_status != POStatus.RECEIVED:
            results = StockLedger(db).apply_batch(po.items, StockDirection.INCREMENT)
            log_action(
                db,
                actor=actor,
                action="PO_RECEIVED",
                resource_type="purchase_orders",
                resource_id=po_id,
                ip_address=ip_address,
                changes={
                    "items": [
                        {
                            "product_id": r.product_id,
                            "quantity": r.quantity,
                            "outcome": r.outcome.value,
                        }
                        for r in results
                    ],
                },
            )
            logger.info("Purchase order %s received (%d lines)", po_id, len(results))

        po.status = new_status
        log_action(
            db,
            actor=actor,
            action="PO_STATUS_UPDATED",
            resource_type="purchase_orders",
            resource_id=po_id,
            ip_address=ip_address,
            changes={"from": old_status.value, "to": new_status.value},
        )
        db.commit()

    db.refresh(po)
    return po
