from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from backend.app.core.config import settings
from backend.app.models.inventory import Product
from backend.app.models.orders import Order, OrderStatus
from backend.app.models.pos import Sale

ZERO = Decimal("0")

CLOSED_ORDER_STATUSES = (OrderStatus.CANCELLED, OrderStatus.DELIVERED)


def _sale_day(sale: Sale) -> date:
    created = sale.created_at
    if created.tzinfo is not None:
        created = created.astimezone(timezone.utc)
    return created.date()


# ── Dashboard ───────────────────────────────────────────────────────────


def get_dashboard(db: Session, today: date | None = None) -> dict[str, object]:
    """Headline figures: today's takings, low stock, open orders, stock value
    and a seven-day sales series (oldest day first)."""
    today = today or datetime.now(timezone.utc).date()
    first_day = today - timedelta(days=6)

    daily: dict[date, Decimal] = {first_day + timedelta(days=i): ZERO for i in range(7)}
    for sale in db.query(Sale).all():
        day = _sale_day(sale)
        if day in daily:
            daily[day] += Decimal(str(sale.total))

    low_stock = (
        db.query(Product)
        .filter(Product.current_stock <= settings.LOW_STOCK_THRESHOLD)
        .order_by(Product.current_stock, Product.id)
        .all()
    )

    active_orders = (
        db.query(Order).filter(Order.status.notin_(CLOSED_ORDER_STATUSES)).count()
    )

    stock_value = sum(
        (Decimal(str(p.unit_price)) * p.current_stock for p in db.query(Product).all()),
        ZERO,
    )

    return {
        "sales_today": daily[today],
        "low_stock": [
            {"id": p.id, "name": p.name, "current_stock": p.current_stock}
            for p in low_stock
        ],
        "active_orders": active_orders,
        "stock_value": stock_value,
        "last_7_days": [
            {"date": day.isoformat(), "total": total} for day, total in daily.items()
        ],
        "generated_at": datetime.now(timezone.utc),
    }
