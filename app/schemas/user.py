# app/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.core.config import Roles
from app.schemas.common import CamelModel


def _check_role(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in Roles.ALL:
        raise ValueError(f"Rol no válido: {value}")
    return value


class UserBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    apartment_number: Optional[int] = Field(None, ge=1, le=48)


class UserCreate(UserBase):
    password: str = Field(..., min_length=8)
    role: str = Roles.USER

    _role = field_validator("role")(_check_role)


class UserUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    email: Optional[EmailStr] = None
    apartment_number: Optional[int] = Field(None, ge=1, le=48)
    password: Optional[str] = Field(None, min_length=8)
    role: Optional[str] = None

    _role = field_validator("role")(_check_role)


class UserRead(CamelModel):
    id: int
    name: str
    email: str
    apartment_number: Optional[int] = None
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
