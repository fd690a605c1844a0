from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.api.deps import client_ip, get_actor
from backend.app.core.database import get_db
from backend.app.models.orders import Order, OrderStatus
from backend.app.schemas.orders import (
    OrderConvertOut,
    OrderConvertRequest,
    OrderCreate,
    OrderOut,
    OrderPaymentCreate,
    OrderStatusOut,
    OrderStatusUpdate,
)
from backend.app.services.orders import (
    SERVICES_CATALOG,
    add_payment,
    convert_to_sale,
    create_order,
    delete_order,
    get_order,
    list_orders,
    set_order_status,
)

router = APIRouter()


@router.get("/services", response_model=dict[str, Decimal])
def list_services() -> dict[str, Decimal]:
    return SERVICES_CATALOG


@router.get("/", response_model=list[OrderOut])
def list_orders_endpoint(
    status_filter: OrderStatus | None = None,
    db: Session = Depends(get_db),
) -> list[Order]:
    return list_orders(db, status=status_filter)


@router.get("/{order_id}", response_model=OrderOut)
def get_order_endpoint(order_id: int, db: Session = Depends(get_db)) -> Order:
    try:
        return get_order(db, order_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_order_endpoint(
    payload: OrderCreate,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> Order:
    try:
        return create_order(db, payload, actor=actor, ip_address=ip_address)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.patch("/{order_id}/status", response_model=OrderStatusOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusUpdate,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> dict:
    try:
        order, conversion_available = set_order_status(
            db, order_id, payload.status, actor=actor, ip_address=ip_address
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"order": order, "conversion_available": conversion_available}


@router.post("/{order_id}/payments", response_model=OrderOut)
def add_payment_endpoint(
    order_id: int,
    payload: OrderPaymentCreate,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> Order:
    try:
        return add_payment(
            db, order_id, payload.amount, payload.method, actor=actor, ip_address=ip_address
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{order_id}/convert", response_model=OrderConvertOut)
def convert_order_endpoint(
    order_id: int,
    payload: OrderConvertRequest,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> dict:
    sale_id = convert_to_sale(
        db, order_id, payload.invoice_type, actor=actor, ip_address=ip_address
    )
    return {"converted": sale_id is not None, "sale_id": sale_id}


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order_endpoint(
    order_id: int,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> None:
    try:
        delete_order(db, order_id, actor=actor, ip_address=ip_address)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
