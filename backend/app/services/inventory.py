from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal

from sqlalchemy.orm import Session

from backend.app.models.inventory import Product
from backend.app.schemas.inventory import CartLineIn, ProductCreate, ProductUpdate
from backend.app.services.audit import log_action
from backend.app.services.stock_ledger import StockDirection, StockLedger, ledger_lock


@dataclass(frozen=True)
class LineSnapshot:
    """Frozen copy of a product as it was when a line was added to a document."""

    product_id: str
    name: str
    category: str | None
    unit_price: Decimal
    supplier_price: Decimal
    supplier: str | None
    quantity: int

    def as_columns(self, position: int) -> dict[str, object]:
        return {**asdict(self), "position": position}


def snapshot_lines(
    db: Session,
    lines: list[CartLineIn],
    price_field: str = "unit_price",
) -> list[LineSnapshot]:
    """Freeze cart lines against the current product directory.

    Fields the caller sent win over the directory values. A line whose
    product no longer exists is kept as long as it carries its own name and
    *price_field*; the stock ledger will skip it later.
    """
    ledger = StockLedger(db)
    snapshots: list[LineSnapshot] = []
    for line in lines:
        product = ledger.lookup(line.product_id)
        if product is None:
            if line.name is None or getattr(line, price_field) is None:
                raise ValueError(
                    f"Product {line.product_id} not found and the line carries "
                    f"no name/{price_field} snapshot"
                )
            snapshots.append(LineSnapshot(
                product_id=line.product_id,
                name=line.name,
                category=line.category,
                unit_price=line.unit_price if line.unit_price is not None else Decimal("0"),
                supplier_price=(
                    line.supplier_price if line.supplier_price is not None else Decimal("0")
                ),
                supplier=line.supplier,
                quantity=line.quantity,
            ))
            continue

        snapshots.append(LineSnapshot(
            product_id=product.id,
            name=line.name if line.name is not None else product.name,
            category=line.category if line.category is not None else product.category,
            unit_price=Decimal(str(
                line.unit_price if line.unit_price is not None else product.unit_price
            )),
            supplier_price=Decimal(str(
                line.supplier_price
                if line.supplier_price is not None
                else product.supplier_price
            )),
            supplier=line.supplier if line.supplier is not None else product.supplier,
            quantity=line.quantity,
        ))
    return snapshots


# ─── Product directory ──────────────────────────────────────────────────────


def next_product_id(db: Session) -> str:
    """Next free ``P-NNNN`` code, starting after the current product count."""
    n = db.query(Product).count() + 1
    while db.get(Product, f"P-{n:04d}") is not None:
        n += 1
    return f"P-{n:04d}"


def get_product(db: Session, product_id: str) -> Product:
    product = db.get(Product, product_id)
    if not product:
        raise ValueError(f"Product {product_id} not found")
    return product


def list_products(
    db: Session,
    search: str | None = None,
    category: str | None = None,
    in_stock_only: bool = False,
) -> list[Product]:
    query = db.query(Product)
    if category:
        query = query.filter(Product.category == category)
    if in_stock_only:
        query = query.filter(Product.current_stock > 0)
    products = query.order_by(Product.id).all()
    if search:
        term = search.lower()
        products = [
            p for p in products if term in p.name.lower() or term in p.id.lower()
        ]
    return products


def create_product(
    db: Session,
    data: ProductCreate,
    actor: str | None = None,
    ip_address: str | None = None,
) -> Product:
    product_id = data.id or next_product_id(db)
    if db.get(Product, product_id) is not None:
        raise ValueError(f"Product {product_id} already exists")

    product = Product(
        id=product_id,
        name=data.name,
        category=data.category,
        unit_price=data.unit_price,
        supplier_price=data.supplier_price,
        current_stock=data.current_stock,
        supplier=data.supplier,
    )
    db.add(product)

    log_action(
        db,
        actor=actor,
        action="PRODUCT_CREATED",
        resource_type="products",
        resource_id=product_id,
        ip_address=ip_address,
        changes={"name": data.name, "initial_stock": data.current_stock},
    )

    db.commit()
    db.refresh(product)
    return product


def update_product(
    db: Session,
    product_id: str,
    data: ProductUpdate,
    actor: str | None = None,
    ip_address: str | None = None,
) -> Product:
    product = get_product(db, product_id)

    changes: dict[str, object] = {}
    for field, value in data.model_dump(exclude_unset=True).items():
        changes[field] = {"from": str(getattr(product, field)), "to": str(value)}
        setattr(product, field, value)

    log_action(
        db,
        actor=actor,
        action="PRODUCT_UPDATED",
        resource_type="products",
        resource_id=product_id,
        ip_address=ip_address,
        changes=changes,
    )

    db.commit()
    db.refresh(product)
    return product


def delete_product(
    db: Session,
    product_id: str,
    actor: str | None = None,
    ip_address: str | None = None,
) -> None:
    """Delete a product. Past sales and orders keep their own copies of it."""
    product = get_product(db, product_id)
    db.delete(product)
    log_action(
        db,
        actor=actor,
        action="PRODUCT_DELETED",
        resource_type="products",
        resource_id=product_id,
        ip_address=ip_address,
    )
    db.commit()


# ─── Stock Adjustments ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class _AdjustmentLine:
    product_id: str
    quantity: int


def adjust_stock(
    db: Session,
    product_id: str,
    quantity: int,
    notes: str | None = None,
    actor: str | None = None,
    ip_address: str | None = None,
) -> Product:
    """Manual stock correction through the ledger.

    Positive quantity adds stock; negative removes it, flooring at zero.
    """
    with ledger_lock:
        product = get_product(db, product_id)
        direction = StockDirection.INCREMENT if quantity > 0 else StockDirection.DECREMENT
        [result] = StockLedger(db).apply_batch(
            [_AdjustmentLine(product_id, abs(quantity))], direction
        )

        log_action(
            db,
            actor=actor,
            action="STOCK_ADJUSTMENT",
            resource_type="products",
            resource_id=product_id,
            ip_address=ip_address,
            changes={
                "product": product.name,
                "quantity": quantity,
                "stock_before": result.stock_before,
                "stock_after": result.stock_after,
                "notes": notes,
            },
        )

        db.commit()
    db.refresh(product)
    return product
