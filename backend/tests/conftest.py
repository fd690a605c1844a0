"""Shared test fixtures.

Each test gets its own in-memory SQLite database with every table created,
so tests never pollute each other or a real database.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import backend.app.models.registry  # noqa: F401
from backend.app.core.database import Base, get_db
from backend.app.main import app
from backend.app.models.customer import Client
from backend.app.models.inventory import Product
from backend.app.models.pos import Discount, DiscountType
from backend.app.models.supplier import Supplier
from backend.app.services.email_service import EmailService
from backend.app.services.notification_service import NotificationService


# ─── DB session on a throwaway database ──────────────────────────────────────


@pytest.fixture()
def db() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()

    yield session

    session.close()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def client(db: Session) -> Generator[TestClient, None, None]:
    """FastAPI TestClient wired to the test session."""

    def _override_get_db() -> Generator[Session, None, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ─── Notifications ───────────────────────────────────────────────────────────


class RecordingEmail(EmailService):
    """Captures outgoing mail instead of talking to an SMTP server."""

    def __init__(self) -> None:
        self.sent: list[dict[str, str]] = []

    def send(
        self,
        to: str,
        subject: str,
        body_html: str,
        from_addr: str | None = None,
    ) -> bool:
        self.sent.append({"to": to, "subject": subject, "body": body_html})
        return True


@pytest.fixture()
def outbox() -> RecordingEmail:
    return RecordingEmail()


@pytest.fixture()
def notifier(outbox: RecordingEmail) -> NotificationService:
    return NotificationService(email=outbox)


# ─── Directory data ──────────────────────────────────────────────────────────


@pytest.fixture()
def products(db: Session) -> dict[str, Product]:
    """The first demo products: a chair (12 in stock), a table (4) and a lamp (25)."""
    items = [
        Product(
            id="P-0001",
            name="Silla de Roble Clásica",
            category="Muebles",
            unit_price=Decimal("45000"),
            supplier_price=Decimal("22000"),
            current_stock=12,
            supplier="Maderas del Sur",
        ),
        Product(
            id="P-0002",
            name="Mesa Ratona Industrial",
            category="Muebles",
            unit_price=Decimal("65000"),
            supplier_price=Decimal("35000"),
            current_stock=4,
            supplier="Hierros & Madera",
        ),
        Product(
            id="P-0004",
            name="Lámpara LED Colgante",
            category="Electrónica",
            unit_price=Decimal("18500"),
            supplier_price=Decimal("9000"),
            current_stock=25,
            supplier="ElectroGlobal SA",
        ),
    ]
    db.add_all(items)
    db.commit()
    return {p.id: p for p in items}


@pytest.fixture()
def customer(db: Session) -> Client:
    c = Client(
        first_name="Juan",
        last_name="Perez",
        email="juan.perez@gmail.com",
        phone="11-1234-5678",
        address="Calle Falsa 123",
    )
    db.add(c)
    db.commit()
    return c


@pytest.fixture()
def supplier(db: Session) -> Supplier:
    s = Supplier(
        id="PR-0001",
        name="Maderas del Sur",
        category="Maderas",
        phone="11-4455-6677",
        email="ventas@maderasur.com",
        address="Av. Forestal 123",
    )
    db.add(s)
    db.commit()
    return s


@pytest.fixture()
def discounts(db: Session) -> dict[str, Discount]:
    items = [
        Discount(name="Efectivo", discount_type=DiscountType.PERCENTAGE, value=Decimal("10"), active=True),
        Discount(name="Promo Verano", discount_type=DiscountType.FIXED, value=Decimal("5000"), active=True),
        Discount(name="Cliente VIP", discount_type=DiscountType.PERCENTAGE, value=Decimal("20"), active=False),
    ]
    db.add_all(items)
    db.commit()
    return {d.name: d for d in items}
