from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.database import get_db
from backend.app.models.pos import Sale
from backend.app.schemas.pos import SaleHistoryOut, SaleOut
from backend.app.services.sales import get_sale, list_sales

router = APIRouter()


@router.get("/", response_model=list[SaleHistoryOut])
def list_sales_endpoint(
    search: str | None = None,
    db: Session = Depends(get_db),
) -> list[dict]:
    return list_sales(db, search=search)


@router.get("/{sale_id}", response_model=SaleOut)
def get_sale_endpoint(sale_id: int, db: Session = Depends(get_db)) -> Sale:
    try:
        return get_sale(db, sale_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
