from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.api.deps import client_ip, get_actor
from backend.app.core.database import get_db
from backend.app.models.inventory import CATEGORIES, Product
from backend.app.schemas.inventory import (
    ProductCreate,
    ProductOut,
    ProductUpdate,
    StockAdjustmentCreate,
)
from backend.app.services.inventory import (
    adjust_stock,
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)

router = APIRouter()


@router.get("/categories", response_model=list[str])
def list_categories() -> list[str]:
    return CATEGORIES


@router.get("/products", response_model=list[ProductOut])
def list_products_endpoint(
    search: str | None = None,
    category: str | None = None,
    in_stock_only: bool = False,
    db: Session = Depends(get_db),
) -> list[Product]:
    return list_products(db, search=search, category=category, in_stock_only=in_stock_only)


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product_endpoint(product_id: str, db: Session = Depends(get_db)) -> Product:
    try:
        return get_product(db, product_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/products", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product_endpoint(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> Product:
    try:
        return create_product(db, payload, actor=actor, ip_address=ip_address)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.put("/products/{product_id}", response_model=ProductOut)
def update_product_endpoint(
    product_id: str,
    payload: ProductUpdate,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> Product:
    try:
        return update_product(db, product_id, payload, actor=actor, ip_address=ip_address)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product_endpoint(
    product_id: str,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> None:
    try:
        delete_product(db, product_id, actor=actor, ip_address=ip_address)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/products/{product_id}/adjust", response_model=ProductOut)
def adjust_stock_endpoint(
    product_id: str,
    payload: StockAdjustmentCreate,
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> Product:
    try:
        return adjust_stock(
            db,
            product_id,
            payload.quantity,
            notes=payload.notes,
            actor=actor,
            ip_address=ip_address,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
