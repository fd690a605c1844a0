from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.database import get_db
from backend.app.models.supplier import Supplier
from backend.app.schemas.supplier import SupplierCreate, SupplierOut, SupplierUpdate
from backend.app.services.directory import (
    create_supplier,
    delete_supplier,
    get_supplier,
    list_suppliers,
    update_supplier,
)

router = APIRouter()


@router.get("/", response_model=list[SupplierOut])
def list_suppliers_endpoint(db: Session = Depends(get_db)) -> list[Supplier]:
    return list_suppliers(db)


@router.get("/{supplier_id}", response_model=SupplierOut)
def get_supplier_endpoint(supplier_id: str, db: Session = Depends(get_db)) -> Supplier:
    try:
        return get_supplier(db, supplier_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
def create_supplier_endpoint(
    payload: SupplierCreate,
    db: Session = Depends(get_db),
) -> Supplier:
    try:
        return create_supplier(db, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.put("/{supplier_id}", response_model=SupplierOut)
def update_supplier_endpoint(
    supplier_id: str,
    payload: SupplierUpdate,
    db: Session = Depends(get_db),
) -> Supplier:
    try:
        return update_supplier(db, supplier_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_supplier_endpoint(supplier_id: str, db: Session = Depends(get_db)) -> None:
    try:
        delete_supplier(db, supplier_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
