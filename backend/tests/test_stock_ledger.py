"""Tests for the stock ledger."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from backend.app.models.inventory import Product
from backend.app.services.stock_ledger import (
    LineOutcome,
    StockDirection,
    StockLedger,
)


@dataclass
class _Line:
    product_id: str
    quantity: int


class TestDecrement:
    def test_decrement_reduces_stock(self, db: Session, products: dict[str, Product]) -> None:
        result = StockLedger(db).decrement("P-0001", 3)
        assert result.applied
        assert result.stock_before == 12
        assert result.stock_after == 9
        assert products["P-0001"].current_stock == 9

    def test_over_decrement_floors_at_zero(self, db: Session, products: dict[str, Product]) -> None:
        """Selling 10 of a product with 4 in stock leaves exactly 0."""
        result = StockLedger(db).decrement("P-0002", 10)
        assert result.applied
        assert products["P-0002"].current_stock == 0

    def test_unknown_product_is_skipped(self, db: Session, products: dict[str, Product]) -> None:
        result = StockLedger(db).decrement("P-9999", 1)
        assert not result.applied
        assert result.outcome == LineOutcome.SKIPPED_UNKNOWN_ID
        assert result.stock_after is None


class TestIncrement:
    def test_increment_has_no_upper_bound(self, db: Session, products: dict[str, Product]) -> None:
        StockLedger(db).increment("P-0004", 1000)
        assert products["P-0004"].current_stock == 1025


class TestApplyBatch:
    def test_batch_applies_every_line_and_skips_unknown(
        self, db: Session, products: dict[str, Product]
    ) -> None:
        lines = [_Line("P-9999", 1), _Line("P-0001", 1), _Line("P-0004", 5)]
        results = StockLedger(db).apply_batch(lines, StockDirection.DECREMENT)

        assert [r.outcome for r in results] == [
            LineOutcome.SKIPPED_UNKNOWN_ID,
            LineOutcome.APPLIED,
            LineOutcome.APPLIED,
        ]
        assert products["P-0001"].current_stock == 11
        assert products["P-0004"].current_stock == 20

    def test_duplicate_lines_accumulate(self, db: Session, products: dict[str, Product]) -> None:
        lines = [_Line("P-0001", 2), _Line("P-0001", 3)]
        StockLedger(db).apply_batch(lines, StockDirection.DECREMENT)
        assert products["P-0001"].current_stock == 7

    def test_ledger_does_not_commit(self, db: Session, products: dict[str, Product]) -> None:
        StockLedger(db).apply_batch([_Line("P-0001", 2)], StockDirection.INCREMENT)
        db.rollback()
        assert db.get(Product, "P-0001").current_stock == 12
