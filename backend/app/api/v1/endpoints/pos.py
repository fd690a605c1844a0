from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.api.deps import client_ip, get_actor
from backend.app.core.database import get_db
from backend.app.models.pos import PAYMENT_METHODS, Sale
from backend.app.schemas.pos import SaleOut, SaleRequest
from backend.app.services.pos import record_sale
from backend.app.services.sales import get_sale

router = APIRouter()


@router.get("/payment-methods", response_model=list[str])
def list_payment_methods() -> list[str]:
    return PAYMENT_METHODS


@router.post("/sale", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
def create_sale(
    payload: SaleRequest,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> Sale:
    try:
        sale_id = record_sale(
            db,
            lines=payload.items,
            client_id=payload.client_id,
            payment_method=payload.payment_method,
            invoice_type=payload.invoice_type,
            discount_id=payload.discount_id,
            surcharge_type=payload.surcharge_type,
            surcharge_value=payload.surcharge_value,
            actor=actor,
            ip_address=ip_address,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return get_sale(db, sale_id)
