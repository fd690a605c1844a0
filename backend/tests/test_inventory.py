"""Tests for the product directory and manual stock adjustments."""
from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from backend.app.models.audit import AuditLog
from backend.app.models.inventory import Product
from backend.app.schemas.inventory import CartLineIn, ProductCreate, ProductUpdate
from backend.app.services.inventory import (
    adjust_stock,
    create_product,
    delete_product,
    list_products,
    next_product_id,
    snapshot_lines,
    update_product,
)


class TestProductDirectory:
    def test_generated_id(self, db: Session, products: dict[str, Product]) -> None:
        # Three products exist; P-0004 is taken so the next free code is P-0005.
        assert next_product_id(db) == "P-0005"
        p = create_product(db, ProductCreate(name="Fuente 12V 5A", unit_price=Decimal("8500")))
        assert p.id == "P-0005"
        assert p.category == "General"

    def test_first_product_id(self, db: Session) -> None:
        assert next_product_id(db) == "P-0001"

    def test_duplicate_id_rejected(self, db: Session, products: dict[str, Product]) -> None:
        with pytest.raises(ValueError, match="already exists"):
            create_product(db, ProductCreate(id="P-0001", name="Otra", unit_price=Decimal("1")))

    def test_update_does_not_touch_stock(self, db: Session, products: dict[str, Product]) -> None:
        p = update_product(db, "P-0001", ProductUpdate(unit_price=Decimal("47000")))
        assert p.unit_price == Decimal("47000")
        assert p.current_stock == 12

    def test_search_and_filter(self, db: Session, products: dict[str, Product]) -> None:
        assert [p.id for p in list_products(db, search="silla")] == ["P-0001"]
        assert [p.id for p in list_products(db, category="Electrónica")] == ["P-0004"]

    def test_delete(self, db: Session, products: dict[str, Product]) -> None:
        delete_product(db, "P-0002")
        assert db.get(Product, "P-0002") is None
        with pytest.raises(ValueError):
            delete_product(db, "P-0002")


class TestStockAdjustment:
    def test_positive_adjustment(self, db: Session, products: dict[str, Product]) -> None:
        p = adjust_stock(db, "P-0002", 6, notes="Conteo físico")
        assert p.current_stock == 10
        log = db.query(AuditLog).filter_by(action="STOCK_ADJUSTMENT").one()
        assert log.new_values["stock_before"] == 4
        assert log.new_values["stock_after"] == 10

    def test_negative_adjustment_floors_at_zero(
        self, db: Session, products: dict[str, Product]
    ) -> None:
        assert adjust_stock(db, "P-0002", -9).current_stock == 0

    def test_unknown_product(self, db: Session) -> None:
        with pytest.raises(ValueError, match="not found"):
            adjust_stock(db, "P-0404", 1)


class TestSnapshots:
    def test_fields_copied_from_directory(self, db: Session, products: dict[str, Product]) -> None:
        [snap] = snapshot_lines(db, [CartLineIn(product_id="P-0004", quantity=2)])
        assert snap.name == "Lámpara LED Colgante"
        assert snap.unit_price == Decimal("18500")
        assert snap.supplier_price == Decimal("9000")
        assert snap.supplier == "ElectroGlobal SA"

    def test_caller_fields_win(self, db: Session, products: dict[str, Product]) -> None:
        [snap] = snapshot_lines(
            db, [CartLineIn(product_id="P-0004", quantity=1, unit_price=Decimal("17000"))]
        )
        assert snap.unit_price == Decimal("17000")

    def test_unknown_product_needs_price_for_purchase_orders(self, db: Session) -> None:
        line = CartLineIn(product_id="P-0099", quantity=1, name="Viejo", unit_price=Decimal("5"))
        snapshot_lines(db, [line])
        with pytest.raises(ValueError, match="supplier_price"):
            snapshot_lines(db, [line], price_field="supplier_price")
