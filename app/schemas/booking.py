# app/schemas/booking.py
import datetime as dt
from typing import List, Optional

from pydantic import Field, field_validator

from app.models.booking import BookingStatus, MealType
from app.schemas.common import CamelModel


def _check_tables(tables: Optional[List[int]]) -> Optional[List[int]]:
    if tables is None:
        return tables
    if not tables:
        raise ValueError("Debe seleccionar al menos una mesa")
    if any(t < 1 or t > 6 for t in tables) or len(set(tables)) != len(tables):
        raise ValueError("Las mesas deben estar entre 1 y 6 y no repetirse")
    return tables


class BookingCreate(CamelModel):
    apartment_number: int = Field(..., ge=1, le=48)
    date: dt.date
    meal_type: MealType
    number_of_people: int = Field(1, ge=1)
    tables: List[int]
    preparar_fuego: bool = False
    reserva_horno: bool = False
    reserva_brasa: bool = False
    no_cleaning_service: bool = False

    _tables = field_validator("tables")(_check_tables)


class BookingUpdate(CamelModel):
    apartment_number: Optional[int] = Field(None, ge=1, le=48)
    date: Optional[dt.date] = None
    meal_type: Optional[MealType] = None
    number_of_people: Optional[int] = Field(None, ge=1)
    tables: Optional[List[int]] = None
    preparar_fuego: Optional[bool] = None
    reserva_horno: Optional[bool] = None
    reserva_brasa: Optional[bool] = None
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None

    _tables = field_validator("tables")(_check_tables)


class BookingConfirm(CamelModel):
    final_attendees: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None


class BookingRead(CamelModel):
    id: int
    apartment_number: int
    date: dt.date
    meal_type: MealType
    number_of_people: int
    tables: List[int]
    preparar_fuego: bool
    reserva_horno: bool
    reserva_brasa: bool
    no_cleaning_service: bool
    status: BookingStatus
    final_attendees: Optional[int] = None
    notes: Optional[str] = None
    user_id: Optional[int] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
