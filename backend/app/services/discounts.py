from __future__ import annotations

from sqlalchemy.orm import Session

from backend.app.models.pos import Discount
from backend.app.schemas.pos import DiscountCreate, DiscountUpdate
from backend.app.services.audit import log_action


def list_discounts(db: Session, active_only: bool = False) -> list[Discount]:
    query = db.query(Discount)
    if active_only:
        query = query.filter(Discount.active.is_(True))
    return query.order_by(Discount.id).all()


def get_discount(db: Session, discount_id: int) -> Discount:
    discount = db.get(Discount, discount_id)
    if not discount:
        raise ValueError(f"Discount {discount_id} not found")
    return discount


def create_discount(
    db: Session,
    data: DiscountCreate,
    actor: str | None = None,
    ip_address: str | None = None,
) -> Discount:
    discount = Discount(
        name=data.name.strip(),
        discount_type=data.discount_type,
        value=data.value,
        active=data.active,
    )
    db.add(discount)
    db.flush()

    log_action(
        db,
        actor=actor,
        action="DISCOUNT_CREATED",
        resource_type="discounts",
        resource_id=str(discount.id),
        ip_address=ip_address,
        changes={
            "name": discount.name,
            "type": data.discount_type.value,
            "value": str(data.value),
        },
    )

    db.commit()
    db.refresh(discount)
    return discount


def update_discount(
    db: Session,
    discount_id: int,
    data: DiscountUpdate,
    actor: str | None = None,
    ip_address: str | None = None,
) -> Discount:
    discount = get_discount(db, discount_id)
    changes = data.model_dump(exclude_unset=True)
    if "name" in changes and not (changes["name"] or "").strip():
        raise ValueError("Name must not be empty")
    for field, value in changes.items():
        setattr(discount, field, value)

    log_action(
        db,
        actor=actor,
        action="DISCOUNT_UPDATED",
        resource_type="discounts",
        resource_id=str(discount_id),
        ip_address=ip_address,
        changes={k: str(v) for k, v in changes.items()},
    )

    db.commit()
    db.refresh(discount)
    return discount


def toggle_discount(
    db: Session,
    discount_id: int,
    actor: str | None = None,
    ip_address: str | None = None,
) -> Discount:
    discount = get_discount(db, discount_id)
    discount.active = not discount.active

    log_action(
        db,
        actor=actor,
        action="DISCOUNT_TOGGLED",
        resource_type="discounts",
        resource_id=str(discount_id),
        ip_address=ip_address,
        changes={"active": discount.active},
    )

    db.commit()
    db.refresh(discount)
    return discount


def delete_discount(
    db: Session,
    discount_id: int,
    actor: str | None = None,
    ip_address: str | None = None,
) -> None:
    """Delete a discount. Sales that used it keep its name and amount."""
    discount = get_discount(db, discount_id)
    db.delete(discount)
    log_action(
        db,
        actor=actor,
        action="DISCOUNT_DELETED",
        resource_type="discounts",
        resource_id=str(discount_id),
        ip_address=ip_address,
    )
    db.commit()
