"""Tests for the dashboard figures."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from backend.app.models.customer import Client
from backend.app.models.inventory import Product
from backend.app.models.orders import Order, OrderStatus
from backend.app.models.pos import InvoiceType, Sale
from backend.app.services.reports import get_dashboard


def _sale(db: Session, sale_id: int, days_ago: int, total: str) -> None:
    db.add(Sale(
        id=sale_id,
        created_at=datetime.now(timezone.utc) - timedelta(days=days_ago),
        subtotal=Decimal(total),
        total=Decimal(total),
        client="Consumidor Final",
        payment_method="Efectivo",
        invoice_type=InvoiceType.B,
    ))


class TestDashboard:
    def test_sales_series(self, db: Session) -> None:
        _sale(db, 1001, 0, "45000")
        _sale(db, 1002, 0, "18500")
        _sale(db, 1003, 1, "70000")
        _sale(db, 1004, 9, "12000")
        db.commit()

        data = get_dashboard(db)

        assert data["sales_today"] == Decimal("63500")
        series = data["last_7_days"]
        assert len(series) == 7
        assert series[-1]["total"] == Decimal("63500")
        assert series[-2]["total"] == Decimal("70000")
        assert sum(d["total"] for d in series) == Decimal("133500")

    def test_low_stock_and_stock_value(self, db: Session, products: dict[str, Product]) -> None:
        data = get_dashboard(db)
        assert [p["id"] for p in data["low_stock"]] == ["P-0002"]
        # 45000*12 + 65000*4 + 18500*25
        assert data["stock_value"] == Decimal("1262500")

    def test_active_orders_exclude_closed(self, db: Session, customer: Client) -> None:
        for status in (
            OrderStatus.PLACED,
            OrderStatus.IN_PRODUCTION,
            OrderStatus.READY,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        ):
            db.add(Order(client=customer.display_name, status=status, total=Decimal("1000")))
        db.commit()
        assert get_dashboard(db)["active_orders"] == 3
