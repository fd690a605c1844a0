from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.api.deps import client_ip, get_actor
from backend.app.core.database import get_db
from backend.app.models.pos import Discount
from backend.app.schemas.pos import DiscountCreate, DiscountOut, DiscountUpdate
from backend.app.services.discounts import (
    create_discount,
    delete_discount,
    list_discounts,
    toggle_discount,
    update_discount,
)

router = APIRouter()


@router.get("/", response_model=list[DiscountOut])
def list_discounts_endpoint(
    active_only: bool = False,
    db: Session = Depends(get_db),
) -> list[Discount]:
    return list_discounts(db, active_only=active_only)


@router.post("/", response_model=DiscountOut, status_code=status.HTTP_201_CREATED)
def create_discount_endpoint(
    payload: DiscountCreate,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> Discount:
    return create_discount(db, payload, actor=actor, ip_address=ip_address)


@router.put("/{discount_id}", response_model=DiscountOut)
def update_discount_endpoint(
    discount_id: int,
    payload: DiscountUpdate,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> Discount:
    try:
        return update_discount(db, discount_id, payload, actor=actor, ip_address=ip_address)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{discount_id}/toggle", response_model=DiscountOut)
def toggle_discount_endpoint(
    discount_id: int,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> Discount:
    try:
        return toggle_discount(db, discount_id, actor=actor, ip_address=ip_address)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{discount_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_discount_endpoint(
    discount_id: int,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> None:
    try:
        delete_discount(db, discount_id, actor=actor, ip_address=ip_address)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
