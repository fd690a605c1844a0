"""Client and supplier directories."""

from __future__ import annotations

from sqlalchemy.orm import Session

from backend.app.models.customer import Client
from backend.app.models.supplier import Supplier
from backend.app.schemas.customer import ClientCreate, ClientUpdate
from backend.app.schemas.supplier import SupplierCreate, SupplierUpdate


# ─── Clients ──────────────────────────────────────────────────────────────────


def list_clients(db: Session, search: str | None = None) -> list[Client]:
    clients = db.query(Client).order_by(Client.last_name, Client.first_name).all()
    if search:
        term = search.strip().lower()
        clients = [
            c for c in clients
            if term in c.display_name.lower() or term in (c.email or "").lower()
        ]
    return clients


def get_client(db: Session, client_id: int) -> Client:
    client = db.get(Client, client_id)
    if not client:
        raise ValueError(f"Client {client_id} not found")
    return client


def create_client(db: Session, data: ClientCreate) -> Client:
    client = Client(**data.model_dump())
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


def update_client(db: Session, client_id: int, data: ClientUpdate) -> Client:
    client = get_client(db, client_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if field in ("first_name", "last_name"):
            if not value or not value.strip():
                raise ValueError("First and last name are required")
            value = value.strip()
        setattr(client, field, value)
    db.commit()
    db.refresh(client)
    return client


def delete_client(db: Session, client_id: int) -> None:
    """Delete a client. Sales and orders keep the name they were recorded with."""
    client = get_client(db, client_id)
    db.delete(client)
    db.commit()


# ─── Suppliers ────────────────────────────────────────────────────────────────


def next_supplier_id(db: Session) -> str:
    n = db.query(Supplier).count() + 1
    while db.get(Supplier, f"PR-{n:04d}") is not None:
        n += 1
    return f"PR-{n:04d}"


def list_suppliers(db: Session) -> list[Supplier]:
    return db.query(Supplier).order_by(Supplier.name).all()


def get_supplier(db: Session, supplier_id: str) -> Supplier:
    supplier = db.get(Supplier, supplier_id)
    if not supplier:
        raise ValueError(f"Supplier {supplier_id} not found")
    return supplier


def create_supplier(db: Session, data: SupplierCreate) -> Supplier:
    if not data.name.strip():
        raise ValueError("Supplier name is required")
    supplier = Supplier(id=next_supplier_id(db), **data.model_dump())
    db.add(supplier)
    db.commit()
    db.refresh(supplier)
    return supplier


def update_supplier(db: Session, supplier_id: str, data: SupplierUpdate) -> Supplier:
    supplier = get_supplier(db, supplier_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(supplier, field, value)
    db.commit()
    db.refresh(supplier)
    return supplier


def delete_supplier(db: Session, supplier_id: str) -> None:
    supplier = get_supplier(db, supplier_id)
    db.delete(supplier)
    db.commit()
