from __future__ import annotations

from pydantic import BaseModel, field_validator


class ClientCreate(BaseModel):
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("First and last name are required")
        return v.strip()


class ClientUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    notes: str | None = None


class ClientOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    display_name: str
    email: str | None
    phone: str | None
    address: str | None
    notes: str | None

    class Config:
        from_attributes = True
