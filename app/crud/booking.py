# app/crud/booking.py
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.booking import Booking, BookingStatus, MealType


def get_booking(db: Session, booking_id: int) -> Optional[Booking]:
    return db.query(Booking).filter(Booking.id == booking_id).first()


def list_bookings(
    db: Session,
    *,
    on_date: Optional[date] = None,
    meal_type: Optional[MealType] = None,
    apartment_number: Optional[int] = None,
    status: Optional[BookingStatus] = None,
) -> List[Booking]:
    query = db.query(Booking)
    if on_date is not None:
        query = query.filter(Booking.date == on_date)
    if meal_type is not None:
        query = query.filter(Booking.meal_type == meal_type)
    if apartment_number is not None:
        query = query.filter(Booking.apartment_number == apartment_number)
    if status is not None:
        query = query.filter(Booking.status == status)
    return query.order_by(Booking.date, Booking.meal_type, Booking.apartment_number).all()


def active_bookings_for_slot(
    db: Session,
    on_date: date,
    meal_type: MealType,
    exclude_id: Optional[int] = None,
) -> List[Booking]:
    """Reservas no canceladas del turno (las canceladas no ocupan mesas)."""
    query = db.query(Booking).filter(
        Booking.date == on_date,
        Booking.meal_type == meal_type,
        Booking.status != BookingStatus.cancelled,
    )
    if exclude_id is not None:
        query = query.filter(Booking.id != exclude_id)
    return query.all()
