from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.core.database import get_db
from backend.app.models.customer import Client
from backend.app.schemas.customer import ClientCreate, ClientOut, ClientUpdate
from backend.app.services.directory import (
    create_client,
    delete_client,
    get_client,
    list_clients,
    update_client,
)

router = APIRouter()


@router.get("/", response_model=list[ClientOut])
def list_clients_endpoint(
    search: str | None = None,
    db: Session = Depends(get_db),
) -> list[Client]:
    return list_clients(db, search=search)


@router.get("/{client_id}", response_model=ClientOut)
def get_client_endpoint(client_id: int, db: Session = Depends(get_db)) -> Client:
    try:
        return get_client(db, client_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("/", response_model=ClientOut, status_code=status.HTTP_201_CREATED)
def create_client_endpoint(payload: ClientCreate, db: Session = Depends(get_db)) -> Client:
    return create_client(db, payload)


@router.put("/{client_id}", response_model=ClientOut)
def update_client_endpoint(
    client_id: int,
    payload: ClientUpdate,
    db: Session = Depends(get_db),
) -> Client:
    try:
        return update_client(db, client_id, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client_endpoint(client_id: int, db: Session = Depends(get_db)) -> None:
    try:
        delete_client(db, client_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
