from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.api.deps import client_ip, get_actor
from backend.app.core.database import get_db
from backend.app.models.supplier import POStatus, PurchaseOrder
from backend.app.schemas.supplier import POStatusUpdate, PurchaseOrderCreate, PurchaseOrderOut
from backend.app.services.purchase_orders import (
    create_purchase_order,
    get_purchase_order,
    list_purchase_orders,
    set_po_status,
)

router = APIRouter()


@router.get("/", response_model=list[PurchaseOrderOut])
def list_purchase_orders_endpoint(
    status_filter: POStatus | None = None,
    db: Session = Depends(get_db),
) -> list[PurchaseOrder]:
    return list_purchase_orders(db, status=status_filter)


@router.get("/{po_id}", response_model=PurchaseOrderOut)
def get_purchase_order_endpoint(po_id: str, db: Session = Depends(get_db)) -> PurchaseOrder:
    try:
        return get_purchase_order(db, po_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/", response_model=PurchaseOrderOut, status_code=status.HTTP_201_CREATED)
def create_purchase_order_endpoint(
    payload: PurchaseOrderCreate,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> PurchaseOrder:
    try:
        return create_purchase_order(
            db, payload.supplier_id, payload.items, actor=actor, ip_address=ip_address
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.patch("/{po_id}/status", response_model=PurchaseOrderOut)
def update_purchase_order_status(
    po_id: str,
    payload: POStatusUpdate,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> PurchaseOrder:
    try:
        return set_po_status(db, po_id, payload.status, actor=actor, ip_address=ip_address)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
