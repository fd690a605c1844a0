from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from sqlalchemy.orm import Session

from backend.app.api.deps import client_ip, get_actor
from backend.app.core.database import get_db
from backend.app.schemas.backup import BackupImportOut
from backend.app.services.backup import BackupImportError, export_data, import_data

router = APIRouter()


@router.get("/export")
def export_backup(db: Session = Depends(get_db)) -> dict[str, Any]:
    return export_data(db)


@router.post("/import", response_model=BackupImportOut)
def import_backup(
    payload: dict[str, Any] = Body(...),
    db: Session = Depends(get_db),
    actor: str | None = Depends(get_actor),
    ip_address: str | None = Depends(client_ip),
) -> dict:
    try:
        replaced = import_data(db, payload, actor=actor, ip_address=ip_address)
    except BackupImportError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    return {"replaced": replaced}
