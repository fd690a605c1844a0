"""Tests for the purchase-order lifecycle and stock receipts."""
from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from backend.app.models.audit import AuditLog
from backend.app.models.inventory import Product
from backend.app.models.supplier import POStatus, PurchaseOrder, Supplier
from backend.app.schemas.inventory import CartLineIn
from backend.app.services.purchase_orders import create_purchase_order, set_po_status


def _po(db: Session, supplier_id: str, items: list[tuple[str, int]]) -> PurchaseOrder:
    return create_purchase_order(
        db, supplier_id, [CartLineIn(product_id=p, quantity=q) for p, q in items]
    )


def _stock(db: Session, product_id: str) -> int:
    db.expire_all()
    return db.get(Product, product_id).current_stock


class TestCreatePurchaseOrder:
    def test_total_uses_supplier_price(
        self, db: Session, products: dict[str, Product], supplier: Supplier
    ) -> None:
        """10 chairs at 22000 + 5 lamps at 9000 = 265000."""
        po = _po(db, supplier.id, [("P-0001", 10), ("P-0004", 5)])
        assert po.total == Decimal("265000")
        assert po.status == POStatus.PENDING
        assert po.id.startswith("OC-")
        assert len(po.items) == 2

    def test_creation_does_not_move_stock(
        self, db: Session, products: dict[str, Product], supplier: Supplier
    ) -> None:
        _po(db, supplier.id, [("P-0001", 10)])
        assert _stock(db, "P-0001") == 12

    def test_ids_are_unique(
        self, db: Session, products: dict[str, Product], supplier: Supplier
    ) -> None:
        ids = {_po(db, supplier.id, [("P-0001", 1)]).id for _ in range(3)}
        assert len(ids) == 3

    def test_supplier_required(self, db: Session, products: dict[str, Product]) -> None:
        with pytest.raises(ValueError, match="Supplier"):
            _po(db, "", [("P-0001", 1)])

    def test_unknown_supplier(self, db: Session, products: dict[str, Product]) -> None:
        with pytest.raises(ValueError, match="PR-9999"):
            _po(db, "PR-9999", [("P-0001", 1)])

    def test_items_required(self, db: Session, supplier: Supplier) -> None:
        with pytest.raises(ValueError, match="at least one item"):
            _po(db, supplier.id, [])
        assert db.query(PurchaseOrder).count() == 0


class TestReceive:
    def test_received_increments_stock(
        self, db: Session, products: dict[str, Product], supplier: Supplier
    ) -> None:
        po = _po(db, supplier.id, [("P-0004", 5)])
        set_po_status(db, po.id, POStatus.RECEIVED)
        assert _stock(db, "P-0004") == 30

    def test_receiving_twice_increments_once(
        self, db: Session, products: dict[str, Product], supplier: Supplier
    ) -> None:
        """Two Recibida calls add +5 once, not +10."""
        po = _po(db, supplier.id, [("P-0004", 5)])
        set_po_status(db, po.id, POStatus.RECEIVED)
        set_po_status(db, po.id, POStatus.RECEIVED)
        assert _stock(db, "P-0004") == 30
        assert db.query(AuditLog).filter_by(action="PO_RECEIVED").count() == 1

    def test_cancel_does_not_move_stock(
        self, db: Session, products: dict[str, Product], supplier: Supplier
    ) -> None:
        po = _po(db, supplier.id, [("P-0004", 5)])
        updated = set_po_status(db, po.id, POStatus.CANCELLED)
        assert updated.status == POStatus.CANCELLED
        assert _stock(db, "P-0004") == 25

    def test_cancelled_then_received_increments_again(
        self, db: Session, products: dict[str, Product], supplier: Supplier
    ) -> None:
        po = _po(db, supplier.id, [("P-0004", 5)])
        set_po_status(db, po.id, POStatus.RECEIVED)
        set_po_status(db, po.id, POStatus.CANCELLED)
        set_po_status(db, po.id, POStatus.RECEIVED)
        assert _stock(db, "P-0004") == 35

    def test_deleted_product_line_is_skipped(
        self, db: Session, products: dict[str, Product], supplier: Supplier
    ) -> None:
        po = _po(db, supplier.id, [("P-0001", 3), ("P-0004", 2)])
        db.delete(products["P-0001"])
        db.commit()
        set_po_status(db, po.id, POStatus.RECEIVED)
        assert _stock(db, "P-0004") == 27
        assert db.get(Product, "P-0001") is None

    def test_unknown_purchase_order(self, db: Session) -> None:
        with pytest.raises(ValueError, match="not found"):
            set_po_status(db, "OC-0", POStatus.RECEIVED)
