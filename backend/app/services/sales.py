from __future__ import annotations

from sqlalchemy import desc
from sqlalchemy.orm import Session, selectinload

from backend.app.models.pos import Sale


def list_sales(db: Session, search: str | None = None) -> list[dict]:
    """Return completed sales, newest first.

    *search* matches a substring of the sale id or of the client name
    (case-insensitive).
    """
    sales = (
        db.query(Sale)
        .options(selectinload(Sale.lines))
        .order_by(desc(Sale.id))
        .all()
    )

    if search:
        term = search.strip().lower()
        sales = [s for s in sales if term in str(s.id) or term in s.client.lower()]

    return [
        {
            "id": sale.id,
            "created_at": sale.created_at,
            "client": sale.client,
            "payment_method": sale.payment_method,
            "invoice_type": sale.invoice_type,
            "item_count": sum(line.quantity for line in sale.lines),
            "total": sale.total,
        }
        for sale in sales
    ]


def get_sale(db: Session, sale_id: int) -> Sale:
    sale = db.get(Sale, sale_id)
    if not sale:
        raise ValueError(f"Sale {sale_id} not found")
    return sale
