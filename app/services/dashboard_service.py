# app/services/dashboard_service.py
"""
Estadísticas del panel de Admin IT y exportación anual de reservas.

Las agrupaciones por mes se hacen en Python sobre la ventana de los últimos
12 meses para no depender de funciones de fecha de un motor concreto.
"""
from collections import Counter
from datetime import date, datetime
from typing import Any, Dict, List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.config import Roles, settings
from app.models.activity_log import ActivityAction, ActivityLog
from app.models.booking import Booking, BookingStatus, BookingTable, MealType
from app.models.login_event import LoginEvent
from app.models.password_reset import PasswordReset
from app.models.user import User
from app.utils.formatting import MONTH_ABBR, format_date_es

MONTHS_WINDOW = 12


def last_months(today: date, count: int = MONTHS_WINDOW) -> List[Tuple[int, int]]:
    """(año, mes) de los últimos `count` meses, el más antiguo primero."""
    months = []
    year, month = today.year, today.month
    for _ in range(count):
        months.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(months))


def _window_start(today: date) -> datetime:
    year, month = last_months(today)[0]
    return datetime(year, month, 1)


def _monthly_counts(values, today: date) -> List[Dict[str, Any]]:
    buckets = Counter((v.year, v.month) for v in values if v is not None)
    return [
        {"month": MONTH_ABBR[m - 1], "year": y, "count": buckets.get((y, m), 0)}
        for y, m in last_months(today)
    ]


# -----------------------------------------------------
# Usuarios
# -----------------------------------------------------
def user_stats(db: Session, today: date | None = None) -> Dict[str, Any]:
    today = today or date.today()
    start = _window_start(today)

    by_role = dict(db.query(User.role, func.count(User.id)).group_by(User.role).all())
    created = [row[0] for row in db.query(User.created_at).filter(User.created_at >= start).all()]
    month_start = datetime(today.year, today.month, 1)

    device_rows = (
        db.query(LoginEvent.device_type, func.count(LoginEvent.id))
        .filter(LoginEvent.success.is_(True))
        .group_by(LoginEvent.device_type)
        .all()
    )
    device_total = sum(count for _, count in device_rows)
    sessions_by_device = {"desktop": 0, "mobile": 0, "tablet": 0}
    for device, count in device_rows:
        if device in sessions_by_device and device_total:
            sessions_by_device[device] = round(count * 100 / device_total)

    reset_dates = [row[0] for row in db.query(PasswordReset.created_at).filter(PasswordReset.created_at >= start).all()]

    active_rows = (
        db.query(User.name, User.apartment_number, func.count(Booking.id).label("bookings"))
        .join(Booking, Booking.user_id == User.id)
        .group_by(User.id, User.name, User.apartment_number)
        .order_by(func.count(Booking.id).desc())
        .limit(6)
        .all()
    )

    return {
        "totalUsers": db.query(func.count(User.id)).scalar() or 0,
        "usersByRole": {role: by_role.get(role, 0) for role in Roles.ALL},
        "newUsersThisMonth": sum(1 for c in created if c is not None and c.replace(tzinfo=None) >= month_start),
        "newUsersTrend": [m["count"] for m in _monthly_counts(created, today)],
        "passwordResets": db.query(func.count(PasswordReset.id)).scalar() or 0,
        "passwordResetTrends": [
            {"month": m["month"], "resets": m["count"]} for m in _monthly_counts(reset_dates, today)
        ],
        "mostActiveUsers": [
            {"name": name, "apartmentNumber": apt, "actions": count} for name, apt, count in active_rows
        ],
        "sessionsByDevice": sessions_by_device,
    }


# -----------------------------------------------------
# Reservas
# -----------------------------------------------------
def booking_stats(db: Session, today: date | None = None) -> Dict[str, Any]:
    today = today or date.today()
    by_status = dict(db.query(Booking.status, func.count(Booking.id)).group_by(Booking.status).all())
    by_meal = dict(db.query(Booking.meal_type, func.count(Booking.id)).group_by(Booking.meal_type).all())

    deleted = db.query(func.count(ActivityLog.id)).filter(ActivityLog.action == ActivityAction.delete).scalar() or 0
    modifications = db.query(func.count(ActivityLog.id)).filter(ActivityLog.action == ActivityAction.update).scalar() or 0

    avg_attendees = (
        db.query(func.avg(Booking.final_attendees))
        .filter(Booking.status == BookingStatus.confirmed, Booking.final_attendees.isnot(None))
        .scalar()
    )

    booking_dates = [
        row[0] for row in db.query(Booking.date).filter(Booking.date >= _window_start(today).date()).all()
    ]

    apartments = (
        db.query(Booking.apartment_number, func.count(Booking.id))
        .group_by(Booking.apartment_number)
        .order_by(func.count(Booking.id).desc())
        .limit(5)
        .all()
    )
    tables = (
        db.query(BookingTable.table_number, func.count(BookingTable.id))
        .group_by(BookingTable.table_number)
        .order_by(func.count(BookingTable.id).desc())
        .all()
    )

    cancelled = by_status.get(BookingStatus.cancelled, 0) + deleted
    return {
        "totalBookings": sum(by_status.values()),
        "totalConfirmed": by_status.get(BookingStatus.confirmed, 0),
        "totalPending": by_status.get(BookingStatus.pending, 0),
        "totalCancelled": cancelled,
        "bookingsByMonth": [
            {"month": m["month"], "count": m["count"]} for m in _monthly_counts(booking_dates, today)
        ],
        "bookingsByType": {
            "lunch": by_meal.get(MealType.lunch, 0),
            "dinner": by_meal.get(MealType.dinner, 0),
        },
        "averageAttendees": float(avg_attendees or 0),
        "mostBookedApartments": [{"apartmentNumber": apt, "bookings": n} for apt, n in apartments],
        "bookingModifications": modifications,
        "bookingCancellations": cancelled,
        "mostUsedTables": [{"tableNumber": t, "count": n} for t, n in tables],
        "additionalServices": {
            "prepararFuego": db.query(func.count(Booking.id)).filter(Booking.preparar_fuego.is_(True)).scalar() or 0,
            "reservaHorno": db.query(func.count(Booking.id)).filter(Booking.reserva_horno.is_(True)).scalar() or 0,
            "reservaBrasa": db.query(func.count(Booking.id)).filter(Booking.reserva_brasa.is_(True)).scalar() or 0,
        },
    }


# -----------------------------------------------------
# Inicios de sesión
# -----------------------------------------------------
def login_stats(db: Session, today: date | None = None, top: int = 50, recent: int = 100) -> Dict[str, Any]:
    today = today or date.today()
    successful = db.query(LoginEvent).filter(LoginEvent.success.is_(True))

    timestamps = [
        row[0]
        for row in db.query(LoginEvent.timestamp)
        .filter(LoginEvent.success.is_(True), LoginEvent.timestamp >= _window_start(today))
        .all()
    ]

    per_user = (
        db.query(LoginEvent.user_id, User.name, User.apartment_number, func.count(LoginEvent.id))
        .outerjoin(User, User.id == LoginEvent.user_id)
        .filter(LoginEvent.success.is_(True))
        .group_by(LoginEvent.user_id, User.name, User.apartment_number)
        .order_by(func.count(LoginEvent.id).desc())
        .limit(top)
        .all()
    )

    recent_rows = (
        db.query(LoginEvent, User)
        .join(User, User.id == LoginEvent.user_id)
        .filter(LoginEvent.success.is_(True))
        .order_by(LoginEvent.timestamp.desc(), LoginEvent.id.desc())
        .limit(recent)
        .all()
    )

    return {
        "loginActivity": {
            "totalLogins": successful.count(),
            "loginsByUser": [
                {
                    "userId": user_id,
                    "name": name or "Usuario desconocido",
                    "apartmentNumber": apt,
                    "count": count,
                }
                for user_id, name, apt, count in per_user
            ],
            "recentLogins": [
                {
                    "id": event.id,
                    "userId": user.id,
                    "userName": user.name,
                    "apartmentNumber": user.apartment_number,
                    "timestamp": event.timestamp.isoformat() if event.timestamp else None,
                    "deviceType": event.device_type,
                    "browser": event.browser,
                    "location": event.location,
                    "ipAddress": event.ip_address,
                }
                for event, user in recent_rows
            ],
            "loginsByMonth": [
                {"month": m["month"], "count": m["count"]} for m in _monthly_counts(timestamps, today)
            ],
        }
    }


# -----------------------------------------------------
# Exportación anual
# -----------------------------------------------------
def export_year(db: Session, year: int) -> List[Dict[str, Any]]:
    """Reservas confirmadas del año agrupadas por apartamento con su importe."""
    bookings = (
        db.query(Booking)
        .filter(
            Booking.status == BookingStatus.confirmed,
            Booking.date >= date(year, 1, 1),
            Booking.date <= date(year, 12, 31),
        )
        .order_by(Booking.apartment_number, Booking.date)
        .all()
    )

    result: Dict[int, Dict[str, Any]] = {}
    for booking in bookings:
        attendees = booking.final_attendees or booking.number_of_people
        amount = attendees * settings.price_per_person
        services = []
        if booking.preparar_fuego:
            services.append("Fuego")
        if booking.reserva_horno:
            services.append("Horno")
        if booking.reserva_brasa:
            services.append("Brasa")

        entry = result.setdefault(
            booking.apartment_number,
            {
                "apartmentNumber": booking.apartment_number,
                "totalBookings": 0,
                "totalAttendees": 0,
                "totalAmount": 0,
                "bookingDetails": [],
            },
        )
        entry["totalBookings"] += 1
        entry["totalAttendees"] += attendees
        entry["totalAmount"] += amount
        entry["bookingDetails"].append(
            {
                "date": format_date_es(booking.date),
                "mealType": "Comida" if booking.meal_type == MealType.lunch else "Cena",
                "attendees": attendees,
                "amount": amount,
                "tables": booking.tables,
                "services": services,
            }
        )

    return [result[apt] for apt in sorted(result)]


def dashboard(db: Session, today: date | None = None) -> Dict[str, Any]:
    users = user_stats(db, today)
    users["loginActivity"] = login_stats(db, today)["loginActivity"]
    return {"userStats": users, "bookingStats": booking_stats(db, today)}
