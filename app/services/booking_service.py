# app/services/booking_service.py
"""
Lógica de negocio de reservas de mesas, horno y brasa.

Reglas principales:
- Ninguna mesa puede estar en dos reservas activas del mismo turno. Además de
  la comprobación previa (que devuelve un 409 legible), la restricción UNIQUE
  de `booking_tables` protege frente a peticiones concurrentes.
- El horno es único por turno.
- Un turno bloqueado por junta no admite reservas.
- Conserje: reservas con poca antelación o en sus días de descanso llevan
  aviso de "sin limpieza"; en días de descanso no se prepara fuego.
- `cancelled` es un estado final y libera las mesas.
"""
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import Roles, settings
from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from app.crud import booking as booking_crud
from app.crud.activity_log import add_activity
from app.crud.blocked_date import find_block_for_slot
from app.models.activity_log import ActivityAction
from app.models.booking import Booking, BookingStatus, MealType
from app.models.user import User
from app.schemas.booking import BookingConfirm, BookingCreate, BookingUpdate
from app.utils.formatting import ROLE_LABELS, apartment_label, format_date_es, join_es, meal_label
from app.utils.logger import logger

NON_BOOKING_ROLES = (Roles.ADMIN, Roles.MANAGER, Roles.CONSERJE)
READ_ONLY_ROLES = (Roles.MANAGER, Roles.CONSERJE)


# -----------------------------------------------------
# Reglas del conserje
# -----------------------------------------------------
def is_concierge_rest_day(on_date: date) -> bool:
    return on_date.weekday() in settings.concierge_rest_days


def is_short_notice(on_date: date, today: Optional[date] = None) -> bool:
    today = today or date.today()
    return (on_date - today).days <= settings.short_notice_days


def concierge_flags(
    on_date: date,
    *,
    preparar_fuego: bool,
    no_cleaning_requested: bool = False,
    today: Optional[date] = None,
) -> Tuple[bool, bool]:
    """Devuelve (no_cleaning_service, preparar_fuego) ya ajustados."""
    rest_day = is_concierge_rest_day(on_date)
    no_cleaning = rest_day or is_short_notice(on_date, today) or bool(no_cleaning_requested)
    return no_cleaning, (False if rest_day else bool(preparar_fuego))


# -----------------------------------------------------
# Comprobaciones de disponibilidad
# -----------------------------------------------------
def check_slot_available(
    db: Session,
    on_date: date,
    meal_type: MealType,
    tables: List[int],
    reserva_horno: bool,
    exclude_id: Optional[int] = None,
) -> None:
    block = find_block_for_slot(db, on_date, meal_type)
    if block is not None:
        raise ConflictError(
            "Turno bloqueado",
            f"El turno de {meal_label(meal_type)} del {format_date_es(on_date)} está bloqueado: {block.reason.value}",
        )

    existing = booking_crud.active_bookings_for_slot(db, on_date, meal_type, exclude_id=exclude_id)
    taken = {t for b in existing for t in b.tables}
    conflicting = sorted(t for t in tables if t in taken)
    if conflicting:
        raise ConflictError(
            "Conflicto de reserva",
            f"Las mesas {', '.join(str(t) for t in conflicting)} ya están reservadas.",
        )

    if reserva_horno and any(b.reserva_horno for b in existing):
        raise ConflictError(
            "Conflicto de recursos",
            "El horno ya está reservado para este turno por otro usuario.",
        )


def _commit_booking(db: Session, booking: Booking) -> Booking:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Conflicto concurrente de mesas para %s %s", booking.date, booking.meal_type)
        raise ConflictError("Conflicto de reserva", "Alguna de las mesas acaba de ser reservada.")
    db.refresh(booking)
    return booking


# -----------------------------------------------------
# Permisos
# -----------------------------------------------------
def _ensure_can_view(user: User, booking: Booking) -> None:
    if user.role == Roles.USER and booking.apartment_number != user.apartment_number:
        raise PermissionDeniedError("Acceso denegado")


def _ensure_can_modify(user: User, booking: Booking, verb: str) -> None:
    if user.role in READ_ONLY_ROLES:
        raise PermissionDeniedError(f"No tiene permiso para {verb} esta reserva")
    if user.role == Roles.USER:
        if booking.apartment_number != user.apartment_number:
            raise PermissionDeniedError(f"No tiene permiso para {verb} esta reserva")
        if booking.status == BookingStatus.confirmed:
            raise PermissionDeniedError(f"Las reservas confirmadas no se pueden {verb}")


def _actor(user: User) -> str:
    label = ROLE_LABELS.get(user.role)
    return f"{user.name} ({label})" if label else user.name


def _services_text(booking: Booking) -> str:
    services = []
    if booking.preparar_fuego:
        services.append("preparación de fuego")
    if booking.reserva_horno:
        services.append("horno")
    if booking.reserva_brasa:
        services.append("brasa")
    return f" con {join_es(services)}" if services else ""


def _slot_text(booking: Booking) -> str:
    return (
        f"Apto. #{apartment_label(booking.apartment_number)}, mesas {', '.join(str(t) for t in booking.tables)}, "
        f"{meal_label(booking.meal_type)} el {format_date_es(booking.date)}"
    )


# -----------------------------------------------------
# Consultas
# -----------------------------------------------------
def list_for_user(
    db: Session,
    user: User,
    *,
    on_date: Optional[date] = None,
    meal_type: Optional[MealType] = None,
    apartment: Optional[int] = None,
    status: Optional[BookingStatus] = None,
    availability_check: bool = False,
    for_calendar: bool = False,
) -> List[Booking]:
    # Calendario y disponibilidad necesitan ver todas las reservas del turno
    sees_everything = for_calendar or (availability_check and on_date is not None and meal_type is not None)
    apartment_filter = None
    if not sees_everything:
        apartment_filter = user.apartment_number if user.role == Roles.USER else apartment
    return booking_crud.list_bookings(
        db,
        on_date=on_date,
        meal_type=meal_type,
        apartment_number=apartment_filter,
        status=status,
    )


def get_for_user(db: Session, user: User, booking_id: int) -> Booking:
    booking = booking_crud.get_booking(db, booking_id)
    if booking is None:
        raise NotFoundError("Reserva no encontrada")
    _ensure_can_view(user, booking)
    return booking


# -----------------------------------------------------
# Alta
# -----------------------------------------------------
def create_booking(db: Session, user: User, payload: BookingCreate, today: Optional[date] = None) -> Booking:
    if user.role in NON_BOOKING_ROLES:
        raise PermissionDeniedError("No tiene permiso para crear reservas")
    if user.role == Roles.USER and payload.apartment_number != user.apartment_number:
        raise PermissionDeniedError("Solo puede reservar para su propio apartamento")

    check_slot_available(db, payload.date, payload.meal_type, payload.tables, payload.reserva_horno)

    no_cleaning, fuego = concierge_flags(
        payload.date,
        preparar_fuego=payload.preparar_fuego,
        no_cleaning_requested=payload.no_cleaning_service,
        today=today,
    )

    booking = Booking(
        apartment_number=payload.apartment_number,
        date=payload.date,
        meal_type=payload.meal_type,
        number_of_people=payload.number_of_people,
        preparar_fuego=fuego,
        reserva_horno=payload.reserva_horno,
        reserva_brasa=payload.reserva_brasa,
        no_cleaning_service=no_cleaning,
        status=BookingStatus.pending,
        user_id=user.id,
    )
    booking.assign_tables(payload.tables)
    db.add(booking)

    details = f"{_actor(user)} ha reservado para {_slot_text(booking)}{_services_text(booking)}"
    if no_cleaning:
        reason = "descanso conserje" if is_concierge_rest_day(booking.date) else "antelación"
        details += f" (aviso de sin limpieza: {reason})"
    add_activity(
        db,
        ActivityAction.create,
        details,
        user_id=user.id,
        apartment_number=booking.apartment_number,
    )

    booking = _commit_booking(db, booking)
    logger.info("Reserva %s creada para apto %s", booking.id, booking.apartment_number)
    return booking


def concierge_notice(booking: Booking) -> Optional[Dict[str, Any]]:
    """Payload push para el conserje si la reserva pide fuego u horno."""
    services = []
    if booking.preparar_fuego:
        services.append("preparación de fuego")
    if booking.reserva_horno:
        services.append("horno")
    if not services:
        return None
    return {
        "title": "🔔 Nueva reserva",
        "body": (
            f"Apto. {apartment_label(booking.apartment_number)} · {format_date_es(booking.date)} · "
            f"{meal_label(booking.meal_type)} · {join_es(services)}"
        ),
        "tag": f"booking-{booking.id}",
        "data": {"url": "/notifications"},
    }


# -----------------------------------------------------
# Modificación
# -----------------------------------------------------
def update_booking(db: Session, user: User, booking_id: int, payload: BookingUpdate) -> Booking:
    booking = booking_crud.get_booking(db, booking_id)
    if booking is None:
        raise NotFoundError("Reserva no encontrada")
    _ensure_can_modify(user, booking, "modificar")

    if booking.status == BookingStatus.cancelled:
        raise ValidationFailedError("No se puede modificar una reserva cancelada")

    data = payload.model_dump(exclude_unset=True)
    if user.role == Roles.USER:
        data.pop("apartment_number", None)
        if data.get("status") == BookingStatus.confirmed:
            raise PermissionDeniedError("Use la confirmación de reserva para confirmarla")

    new_date = data.get("date", booking.date)
    new_meal = data.get("meal_type", booking.meal_type)
    new_tables = data.get("tables", booking.tables)
    new_horno = data.get("reserva_horno", booking.reserva_horno)
    new_status = data.get("status", booking.status)

    if new_status != BookingStatus.cancelled:
        check_slot_available(db, new_date, new_meal, new_tables, new_horno, exclude_id=booking.id)

    wants_fuego = data.get("preparar_fuego", booking.preparar_fuego)
    if new_date != booking.date:
        booking.no_cleaning_service, booking.preparar_fuego = concierge_flags(new_date, preparar_fuego=wants_fuego)
    else:
        booking.preparar_fuego = False if is_concierge_rest_day(new_date) else bool(wants_fuego)

    for field in ("apartment_number", "number_of_people", "reserva_horno", "reserva_brasa", "notes", "status"):
        if field in data:
            setattr(booking, field, data[field])
    booking.date = new_date
    booking.meal_type = new_meal

    if "tables" in data:
        booking.assign_tables(new_tables)
    else:
        booking.sync_table_slots()

    add_activity(
        db,
        ActivityAction.update,
        f"{_actor(user)} ha modificado la reserva de {_slot_text(booking)}{_services_text(booking)}",
        user_id=user.id,
        apartment_number=booking.apartment_number,
    )
    booking = _commit_booking(db, booking)
    logger.info("Reserva %s modificada por %s", booking.id, user.email)
    return booking


def cancel_booking(db: Session, user: User, booking_id: int) -> Booking:
    booking = booking_crud.get_booking(db, booking_id)
    if booking is None:
        raise NotFoundError("Reserva no encontrada")
    _ensure_can_modify(user, booking, "cancelar")
    if booking.status == BookingStatus.cancelled:
        raise ValidationFailedError("La reserva ya está cancelada")

    booking.status = BookingStatus.cancelled
    booking.sync_table_slots()
    add_activity(
        db,
        ActivityAction.update,
        f"{_actor(user)} ha cancelado la reserva de {_slot_text(booking)}",
        user_id=user.id,
        apartment_number=booking.apartment_number,
    )
    booking = _commit_booking(db, booking)
    logger.info("Reserva %s cancelada", booking.id)
    return booking


def delete_booking(db: Session, user: User, booking_id: int) -> None:
    booking = booking_crud.get_booking(db, booking_id)
    if booking is None:
        raise NotFoundError("Reserva no encontrada")
    _ensure_can_modify(user, booking, "eliminar")

    add_activity(
        db,
        ActivityAction.delete,
        f"{_actor(user)} ha eliminado la reserva de {_slot_text(booking)}{_services_text(booking)}",
        user_id=user.id,
        apartment_number=booking.apartment_number,
    )
    db.delete(booking)
    db.commit()
    logger.info("Reserva %s eliminada por %s", booking_id, user.email)


def confirm_booking(db: Session, user: User, booking_id: int, payload: BookingConfirm) -> Booking:
    booking = booking_crud.get_booking(db, booking_id)
    if booking is None:
        raise NotFoundError("Reserva no encontrada")
    if user.role in READ_ONLY_ROLES:
        raise PermissionDeniedError("No tiene permiso para confirmar esta reserva")
    _ensure_can_view(user, booking)

    if booking.status == BookingStatus.confirmed:
        raise ValidationFailedError("La reserva ya está confirmada")
    if booking.status == BookingStatus.cancelled:
        raise ValidationFailedError("No se puede confirmar una reserva cancelada")

    booking.status = BookingStatus.confirmed
    booking.final_attendees = payload.final_attendees or booking.number_of_people
    if payload.notes is not None:
        booking.notes = payload.notes

    add_activity(
        db,
        ActivityAction.confirm,
        (
            f"Apto. #{booking.apartment_number} ha confirmado la reserva para "
            f"{meal_label(booking.meal_type)} del {format_date_es(booking.date)}, "
            f"mesas {', '.join(str(t) for t in booking.tables)}{_services_text(booking)} "
            f"con {booking.final_attendees} asistentes finales"
        ),
        user_id=user.id,
        apartment_number=booking.apartment_number,
    )
    booking = _commit_booking(db, booking)
    logger.info("Reserva %s confirmada", booking.id)
    return booking
