# app/api/v1/routers/bookings.py
"""
Reservas de mesas, horno y brasa.

Las reglas (conflictos, bloqueos, avisos al conserje, permisos por rol) viven
en app.services.booking_service; aquí sólo se traduce HTTP.
"""
import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.security import get_current_user
from app.db.session import get_db
from app.models.booking import BookingStatus, MealType
from app.models.user import User
from app.schemas.booking import BookingConfirm, BookingCreate, BookingRead, BookingUpdate
from app.schemas.common import MessageResponse
from app.services import booking_service
from app.services.push_service import send_push_to_conserje

router = APIRouter()


@router.get("", response_model=List[BookingRead])
def list_all(
    date: Optional[dt.date] = Query(None),
    meal_type: Optional[MealType] = Query(None, alias="mealType"),
    apartment: Optional[int] = Query(None),
    availability_check: bool = Query(False, alias="availabilityCheck"),
    for_calendar: bool = Query(False, alias="forCalendar"),
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return booking_service.list_for_user(
        db,
        current_user,
        on_date=date,
        meal_type=meal_type,
        apartment=apartment,
        status=booking_status,
        availability_check=availability_check,
        for_calendar=for_calendar,
    )


@router.post("", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
def create(
    payload: BookingCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    booking = booking_service.create_booking(db, current_user, payload)
    notice = booking_service.concierge_notice(booking)
    if notice:
        background_tasks.add_task(send_push_to_conserje, notice)
    return booking


@router.get("/{booking_id}", response_model=BookingRead)
def get_one(booking_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return booking_service.get_for_user(db, current_user, booking_id)


@router.put("/{booking_id}", response_model=BookingRead)
def update(
    booking_id: int,
    payload: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return booking_service.update_booking(db, current_user, booking_id, payload)


@router.delete("/{booking_id}", response_model=MessageResponse)
def delete(booking_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    booking_service.delete_booking(db, current_user, booking_id)
    return {"message": "Reserva eliminada correctamente"}


@router.post("/{booking_id}/confirm", response_model=BookingRead)
def confirm(
    booking_id: int,
    payload: Optional[BookingConfirm] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return booking_service.confirm_booking(db, current_user, booking_id, payload or BookingConfirm())


@router.post("/{booking_id}/cancel", response_model=BookingRead)
def cancel(booking_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return booking_service.cancel_booking(db, current_user, booking_id)
