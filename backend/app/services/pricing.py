"""Cart pricing: subtotal, discount, surcharge and total.

Pure functions over the snapshots they are given; nothing here touches the
database. All amounts are quantized to four decimal places with
ROUND_HALF_UP, matching the Numeric(20, 4) money columns.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Protocol

from backend.app.models.pos import DiscountType

Q = Decimal("0.0001")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


class PricedLine(Protocol):
    unit_price: Decimal
    quantity: int


class DiscountRule(Protocol):
    discount_type: DiscountType
    value: Decimal


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    discount_amount: Decimal
    surcharge_amount: Decimal
    total: Decimal


def _q(value: Decimal) -> Decimal:
    return value.quantize(Q, rounding=ROUND_HALF_UP)


def compute_subtotal(
    lines: Iterable[PricedLine], price_attr: str = "unit_price"
) -> Decimal:
    """Sum of price x quantity over the lines; an empty cart is 0.

    Purchase orders value their lines with ``price_attr="supplier_price"``.
    """
    return _q(
        sum(
            (Decimal(str(getattr(line, price_attr))) * line.quantity for line in lines),
            ZERO,
        )
    )


def compute_discount(subtotal: Decimal, discount: DiscountRule | None) -> Decimal:
    """Discount amount for *discount* applied to *subtotal*.

    A fixed discount is returned as-is even when it exceeds the subtotal;
    the total is what gets clamped.
    """
    if discount is None:
        return ZERO
    value = Decimal(str(discount.value))
    if discount.discount_type == DiscountType.PERCENTAGE:
        return _q(subtotal * value / HUNDRED)
    return _q(value)


def compute_surcharge(
    subtotal: Decimal,
    surcharge_type: DiscountType,
    surcharge_value: Decimal,
) -> Decimal:
    if surcharge_value <= 0:
        return ZERO
    if surcharge_type == DiscountType.PERCENTAGE:
        return _q(subtotal * surcharge_value / HUNDRED)
    return _q(surcharge_value)


def compute_total(
    subtotal: Decimal,
    discount_amount: Decimal,
    surcharge_amount: Decimal,
) -> Decimal:
    return max(ZERO, _q(subtotal - discount_amount + surcharge_amount))


def price_cart(
    lines: Iterable[PricedLine],
    discount: DiscountRule | None = None,
    surcharge_type: DiscountType = DiscountType.PERCENTAGE,
    surcharge_value: Decimal = ZERO,
) -> PriceBreakdown:
    subtotal = compute_subtotal(lines)
    discount_amount = compute_discount(subtotal, discount)
    surcharge_amount = compute_surcharge(subtotal, surcharge_type, surcharge_value)
    return PriceBreakdown(
        subtotal=subtotal,
        discount_amount=discount_amount,
        surcharge_amount=surcharge_amount,
        total=compute_total(subtotal, discount_amount, surcharge_amount),
    )
