"""Seed the database with the demonstration dataset.

Usage:
    python -m backend.scripts.seed

Records that already exist (matched by id or username) are left as they are.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from backend.app.core.database import SessionLocal
from backend.app.core.security import get_password_hash
from backend.app.models.customer import Client
from backend.app.models.inventory import Product
from backend.app.models.orders import Order, OrderItem, OrderPayment, OrderService, OrderStatus
from backend.app.models.pos import Discount, DiscountType, InvoiceType, Sale, SaleLine
from backend.app.models.supplier import POStatus, PurchaseOrder, PurchaseOrderItem, Supplier
from backend.app.models.user import UserAccount, UserRole

USERS: list[tuple[str, UserRole, str]] = [
    ("dueño", UserRole.OWNER, "123123"),
    ("vendedor", UserRole.EMPLOYEE, "123"),
    ("taller", UserRole.EMPLOYEE, "123"),
]

# (id, name, category, price, stock, supplier, supplier price)
PRODUCTS: list[tuple[str, str, str, int, int, str, int]] = [
    ("P-0001", "Silla de Roble Clásica", "Muebles", 45000, 12, "Maderas del Sur", 22000),
    ("P-0002", "Mesa Ratona Industrial", "Muebles", 65000, 4, "Hierros & Madera", 35000),
    ("P-0003", "Sillón Chenille 3 Cuerpos", "Muebles", 350000, 2, "Textiles Unidos", 180000),
    ("P-0004", "Lámpara LED Colgante", "Electrónica", 18500, 25, "ElectroGlobal SA", 9000),
    ("P-0005", "Tira LED RGB 5m", "Electrónica", 12000, 50, "ElectroGlobal SA", 5500),
    ("P-0006", "Fuente 12V 5A", "Electrónica", 8500, 15, "ElectroGlobal SA", 4000),
    ("P-0007", "Barniz Marino 1L", "Materia Prima", 10500, 8, "Maderas del Sur", 6000),
    ("P-0008", "Pack Tornillos x100", "Materia Prima", 3500, 100, "Hierros & Madera", 1200),
    ("P-0009", "Servicio de Instalación", "Servicios", 25000, 999, "Interno", 0),
    ("P-0010", "Escritorio Gamer Pro", "Muebles", 120000, 0, "Maderas del Sur", 60000),
]

SUPPLIERS: list[tuple[str, str, str, str, str, str]] = [
    ("PR-0001", "Maderas del Sur", "Maderas", "11-4455-6677", "ventas@maderasur.com", "Av. Forestal 123"),
    ("PR-0002", "ElectroGlobal SA", "Electrónica", "11-5566-7788", "contacto@electroglobal.com", "Calle Tecnológica 404"),
    ("PR-0003", "Hierros & Madera", "Insumos", "11-2233-4455", "pedidos@hyma.com", "Ruta 8 Km 50"),
    ("PR-0004", "Textiles Unidos", "Telas", "11-9988-7766", "info@textiles.com", "San Martín 500"),
]

CLIENTS: list[tuple[int, str, str, str, str, str]] = [
    (1, "Juan", "Perez", "juan.perez@gmail.com", "11-1234-5678", "Calle Falsa 123"),
    (2, "Maria", "Gonzalez", "mgonzalez@hotmail.com", "11-8765-4321", "Av. Libertador 2000"),
    (3, "Carlos", "Ruiz", "cruiz@outlook.com", "11-1122-3344", "Barrio Norte 5"),
    (4, "Ana", "Lopez", "ana.lopez@yahoo.com", "11-9988-1122", "San Telmo 45"),
]

DISCOUNTS: list[tuple[int, str, DiscountType, int, bool]] = [
    (1, "Efectivo", DiscountType.PERCENTAGE, 10, True),
    (2, "Promo Verano", DiscountType.FIXED, 5000, True),
    (3, "Cliente VIP", DiscountType.PERCENTAGE, 20, False),
]

# (id, days ago, total, client, payment method, invoice type, [(product id, qty)])
SALES = [
    (1001, 0, 45000, "Perez, Juan", "Efectivo", InvoiceType.B, [("P-0001", 1)]),
    (1002, 0, 18500, "Consumidor Final", "QR", InvoiceType.B, [("P-0004", 1)]),
    (1003, 1, 70000, "Gonzalez, Maria", "Transferencia", InvoiceType.A, [("P-0003", 2)]),
    (1004, 2, 12000, "Consumidor Final", "Efectivo", InvoiceType.B, [("P-0005", 1)]),
    (1005, 4, 130000, "Ruiz, Carlos", "Crédito", InvoiceType.A, [("P-0002", 2)]),
]

ORDERS = [
    {
        "id": 5001, "days_ago": 1, "client": "Lopez, Ana", "email": "ana.lopez@yahoo.com",
        "status": OrderStatus.PLACED, "total": 60000,
        "services": {"Carpintería": 5000}, "items": [("P-0001", 2)],
        "observations": "Pintar de color caoba oscuro", "payments": [],
    },
    {
        "id": 5002, "days_ago": 3, "client": "Perez, Juan", "email": "juan.perez@gmail.com",
        "status": OrderStatus.IN_PRODUCTION, "total": 355000,
        "services": {"Tapicería": 4000, "Embalaje": 1500}, "items": [("P-0003", 1)],
        "observations": "Tela entregada por el cliente",
        "payments": [(3, 150000, "Efectivo")],
    },
    {
        "id": 5003, "days_ago": 10, "client": "Gonzalez, Maria", "email": "mgonzalez@hotmail.com",
        "status": OrderStatus.DELIVERED, "total": 25000,
        "services": {"Instalación": 2500}, "items": [("P-0004", 1)],
        "observations": "", "payments": [(10, 25000, "Transferencia")],
    },
]

PURCHASE_ORDERS = [
    ("OC-1710001", 5, "PR-0001", POStatus.RECEIVED, 440000, [("P-0001", 10), ("P-0010", 5)]),
    ("OC-1710002", 1, "PR-0002", POStatus.PENDING, 45000, [("P-0004", 5)]),
]


def _days_ago(days: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days)


def _line(product_id: str, quantity: int, position: int) -> dict[str, object]:
    pid, name, category, price, _stock, supplier, supplier_price = next(
        p for p in PRODUCTS if p[0] == product_id
    )
    return {
        "product_id": pid,
        "name": name,
        "category": category,
        "unit_price": Decimal(price),
        "supplier_price": Decimal(supplier_price),
        "supplier": supplier,
        "quantity": quantity,
        "position": position,
    }


def seed() -> None:
    db = SessionLocal()
    try:
        # ── Users ──────────────────────────────────────────────────────
        for username, role, password in USERS:
            if not db.query(UserAccount).filter_by(username=username).first():
                db.add(UserAccount(
                    username=username,
                    role=role,
                    hashed_password=get_password_hash(password),
                ))
                print(f"Created user: {username}")

        # ── Directories ────────────────────────────────────────────────
        for pid, name, category, price, stock, supplier, supplier_price in PRODUCTS:
            if db.get(Product, pid) is None:
                db.add(Product(
                    id=pid,
                    name=name,
                    category=category,
                    unit_price=Decimal(price),
                    current_stock=stock,
                    supplier=supplier,
                    supplier_price=Decimal(supplier_price),
                ))
                print(f"Created product {pid} - {name}")

        for sid, name, category, phone, email, address in SUPPLIERS:
            if db.get(Supplier, sid) is None:
                db.add(Supplier(
                    id=sid, name=name, category=category, phone=phone, email=email, address=address
                ))
                print(f"Created supplier {sid} - {name}")

        for cid, first, last, email, phone, address in CLIENTS:
            if db.get(Client, cid) is None:
                db.add(Client(
                    id=cid, first_name=first, last_name=last,
                    email=email, phone=phone, address=address,
                ))
                print(f"Created client {last}, {first}")

        for did, name, discount_type, value, active in DISCOUNTS:
            if db.get(Discount, did) is None:
                db.add(Discount(
                    id=did, name=name, discount_type=discount_type,
                    value=Decimal(value), active=active,
                ))
                print(f"Created discount: {name}")

        # ── History ────────────────────────────────────────────────────
        for sale_id, days, total, client, method, invoice_type, lines in SALES:
            if db.get(Sale, sale_id) is None:
                sale = Sale(
                    id=sale_id, created_at=_days_ago(days),
                    subtotal=Decimal(total), total=Decimal(total),
                    client=client, payment_method=method, invoice_type=invoice_type,
                )
                sale.lines = [SaleLine(**_line(p, q, i)) for i, (p, q) in enumerate(lines)]
                db.add(sale)
                print(f"Created sale #{sale_id}")

        for data in ORDERS:
            if db.get(Order, data["id"]) is None:
                order = Order(
                    id=data["id"], created_at=_days_ago(data["days_ago"]),
                    client=data["client"], client_email=data["email"],
                    status=data["status"], total=Decimal(data["total"]),
                    observations=data["observations"],
                )
                order.services = [
                    OrderService(name=n, price=Decimal(p)) for n, p in data["services"].items()
                ]
                order.items = [
                    OrderItem(**_line(p, q, i)) for i, (p, q) in enumerate(data["items"])
                ]
                order.payments = [
                    OrderPayment(created_at=_days_ago(d), amount=Decimal(a), method=m)
                    for d, a, m in data["payments"]
                ]
                db.add(order)
                print(f"Created order #{data['id']}")

        for po_id, days, supplier_id, po_status, total, lines in PURCHASE_ORDERS:
            if db.get(PurchaseOrder, po_id) is None:
                po = PurchaseOrder(
                    id=po_id, created_at=_days_ago(days), supplier_id=supplier_id,
                    status=po_status, total=Decimal(total),
                )
                po.items = [
                    PurchaseOrderItem(**_line(p, q, i)) for i, (p, q) in enumerate(lines)
                ]
                db.add(po)
                print(f"Created purchase order {po_id}")

        db.commit()
        print("Seed complete.")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
