"""Stock ledger: the only code that writes Product.current_stock.

Sales and order conversions decrement, purchase-order receipts increment.
Decrements floor at zero instead of failing, and lines that reference an
unknown product are skipped. Neither case raises; callers that need to know
can inspect the per-line results returned by ``apply_batch``.

The ledger never commits. The calling service commits the stock change in
the same transaction as the document (sale, purchase order) that caused it,
and holds ``ledger_lock`` for the duration.
"""

from __future__ import annotations

import enum
import logging
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.orm import Session

from backend.app.models.inventory import Product

logger = logging.getLogger(__name__)

# Serializes every stock-mutating operation in this process (sync endpoints
# run in a thread pool). Re-entrant so that order conversion can call into
# the sale processor while holding it.
ledger_lock = threading.RLock()


class StockDirection(str, enum.Enum):
    DECREMENT = "DECREMENT"
    INCREMENT = "INCREMENT"


class LineOutcome(str, enum.Enum):
    APPLIED = "applied"
    SKIPPED_UNKNOWN_ID = "skipped: unknown-id"


class StockLine(Protocol):
    product_id: str
    quantity: int


@dataclass(frozen=True)
class LineResult:
    product_id: str
    quantity: int
    outcome: LineOutcome
    stock_before: int | None = None
    stock_after: int | None = None

    @property
    def applied(self) -> bool:
        return self.outcome == LineOutcome.APPLIED


class StockLedger:
    """Narrow interface over the product collection for quantity changes."""

    def __init__(self, db: Session) -> None:
        self._db = db

    def lookup(self, product_id: str) -> Product | None:
        return self._db.get(Product, product_id)

    def decrement(self, product_id: str, quantity: int) -> LineResult:
        """Reduce stock by *quantity*, flooring at zero."""
        product = self.lookup(product_id)
        if product is None:
            return self._skip(product_id, quantity)
        before = product.current_stock
        product.current_stock = max(0, before - quantity)
        return LineResult(
            product_id, quantity, LineOutcome.APPLIED, before, product.current_stock
        )

    def increment(self, product_id: str, quantity: int) -> LineResult:
        product = self.lookup(product_id)
        if product is None:
            return self._skip(product_id, quantity)
        before = product.current_stock
        product.current_stock = before + quantity
        return LineResult(
            product_id, quantity, LineOutcome.APPLIED, before, product.current_stock
        )

    def apply_batch(
        self, lines: Iterable[StockLine], direction: StockDirection
    ) -> list[LineResult]:
        """Apply *direction* to every line in order, skipping unknown products."""
        op = self.decrement if direction == StockDirection.DECREMENT else self.increment
        results = [op(line.product_id, line.quantity) for line in lines]
        self._db.flush()
        return results

    @staticmethod
    def _skip(product_id: str, quantity: int) -> LineResult:
        logger.warning(
            "Stock change skipped: product %s not found (quantity %s)",
            product_id,
            quantity,
        )
        return LineResult(product_id, quantity, LineOutcome.SKIPPED_UNKNOWN_ID)
