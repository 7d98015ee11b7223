"""
Test suite del panel de Admin IT y de la exportación anual.
"""
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models import ActivityAction, ActivityLog, Booking, BookingStatus, LoginEvent, MealType
from app.services import dashboard_service


def add_booking(db: Session, *, apartment: int, on: date, meal=MealType.lunch, people=4, tables=(1,), **fields):
    booking = Booking(
        apartment_number=apartment,
        date=on,
        meal_type=meal,
        number_of_people=people,
        status=fields.pop("status", BookingStatus.pending),
        **fields,
    )
    booking.assign_tables(list(tables))
    db.add(booking)
    db.commit()
    return booking


def add_login(db: Session, user, *, success=True, device="desktop", browser="Chrome"):
    db.add(
        LoginEvent(
            user_id=user.id if user else None,
            ip_address="192.0.2.1",
            user_agent="pytest",
            browser=browser,
            device_type=device,
            success=success,
            failure_reason=None if success else "invalid_password",
        )
    )
    db.commit()


class TestMeses:

    def test_ultimos_doce_meses(self):
        months = dashboard_service.last_months(date(2025, 3, 15))

        assert len(months) == 12
        assert months[0] == (2024, 4)
        assert months[-1] == (2025, 3)


class TestEstadisticasDeReservas:

    def test_totales_y_servicios(self, db: Session):
        """
        GIVEN:
            - 1 reserva confirmada con fuego (6 asistentes finales)
            - 1 pendiente con horno
            - 1 cancelada
            - 1 reserva eliminada (registrada en ActivityLog)
        WHEN: Se calculan las estadísticas
        THEN: Las canceladas suman las eliminadas y los servicios se cuentan
        """
        today = date.today()
        add_booking(
            db, apartment=12, on=today, tables=(1, 2), status=BookingStatus.confirmed,
            final_attendees=6, preparar_fuego=True,
        )
        add_booking(db, apartment=12, on=today, meal=MealType.dinner, tables=(1,), reserva_horno=True)
        add_booking(db, apartment=20, on=today, tables=(3,), status=BookingStatus.cancelled)
        db.add(ActivityLog(action=ActivityAction.delete, details="Reserva eliminada", apartment_number=20))
        db.commit()

        stats = dashboard_service.booking_stats(db, today)

        assert stats["totalBookings"] == 3
        assert stats["totalConfirmed"] == 1
        assert stats["totalPending"] == 1
        assert stats["totalCancelled"] == 2
        assert stats["bookingsByType"] == {"lunch": 2, "dinner": 1}
        assert stats["averageAttendees"] == 6.0
        assert stats["mostBookedApartments"][0] == {"apartmentNumber": 12, "bookings": 2}
        assert stats["additionalServices"] == {"prepararFuego": 1, "reservaHorno": 1, "reservaBrasa": 0}
        assert stats["mostUsedTables"][0]["tableNumber"] == 1
        assert stats["bookingsByMonth"][-1]["count"] == 3


class TestEstadisticasDeUsuarios:

    def test_roles_y_dispositivos(self, db: Session, resident, other_resident, admin, conserje):
        add_login(db, resident, device="mobile", browser="Safari")
        add_login(db, resident, device="mobile", browser="Safari")
        add_login(db, admin)
        add_login(db, other_resident, device="tablet")
        add_login(db, None, success=False)

        stats = dashboard_service.user_stats(db)

        assert stats["totalUsers"] == 4
        assert stats["usersByRole"]["user"] == 2
        assert stats["usersByRole"]["conserje"] == 1
        assert stats["usersByRole"]["it_admin"] == 0
        assert stats["newUsersThisMonth"] == 4
        assert stats["sessionsByDevice"] == {"desktop": 25, "mobile": 50, "tablet": 25}
        assert len(stats["newUsersTrend"]) == 12

    def test_inicios_de_sesion(self, db: Session, resident, admin):
        add_login(db, resident)
        add_login(db, resident)
        add_login(db, admin)
        add_login(db, None, success=False)

        activity = dashboard_service.login_stats(db)["loginActivity"]

        assert activity["totalLogins"] == 3
        assert activity["loginsByUser"][0]["userId"] == resident.id
        assert activity["loginsByUser"][0]["count"] == 2
        assert len(activity["recentLogins"]) == 3
        assert activity["recentLogins"][0]["userName"] == "Admin Junta"
        assert activity["loginsByMonth"][-1]["count"] == 3


class TestExportacion:

    @pytest.fixture
    def bookings_2025(self, db: Session):
        add_booking(
            db, apartment=20, on=date(2025, 3, 7), tables=(1,), people=4,
            status=BookingStatus.confirmed, final_attendees=5, preparar_fuego=True, reserva_brasa=True,
        )
        add_booking(
            db, apartment=12, on=date(2025, 5, 2), meal=MealType.dinner, tables=(2, 3), people=8,
            status=BookingStatus.confirmed,
        )
        add_booking(
            db, apartment=12, on=date(2025, 6, 6), tables=(4,), people=3,
            status=BookingStatus.confirmed, final_attendees=2, reserva_horno=True,
        )
        # No se exportan: pendiente y de otro año
        add_booking(db, apartment=12, on=date(2025, 7, 4), tables=(1,), people=10)
        add_booking(db, apartment=12, on=date(2024, 12, 27), tables=(1,), status=BookingStatus.confirmed)

    def test_agrupa_por_apartamento(self, db: Session, bookings_2025):
        """
        GIVEN: Reservas confirmadas de 2025 en los apartamentos 12 y 20
        WHEN: Se exporta 2025
        THEN:
            - Un registro por apartamento, ordenados
            - Importe = asistentes finales × 7 €
            - Servicios y turno en texto
        """
        result = dashboard_service.export_year(db, 2025)

        assert [r["apartmentNumber"] for r in result] == [12, 20]
        apt12, apt20 = result
        assert apt12["totalBookings"] == 2
        assert apt12["totalAttendees"] == 10
        assert apt12["totalAmount"] == 70
        assert apt12["bookingDetails"][0] == {
            "date": "2/5/2025",
            "mealType": "Cena",
            "attendees": 8,
            "amount": 56,
            "tables": [2, 3],
            "services": [],
        }
        assert apt12["bookingDetails"][1]["services"] == ["Horno"]
        assert apt20["totalAmount"] == 35
        assert apt20["bookingDetails"][0]["services"] == ["Fuego", "Brasa"]

    def test_endpoint_de_exportacion(self, client: TestClient, bookings_2025, auth_header_it_admin):
        response = client.get("/api/export?year=2025", headers=auth_header_it_admin)
        assert response.status_code == 200
        assert len(response.json()) == 2

    @pytest.mark.parametrize("year", ["20x5", "-1", "0"])
    def test_año_no_valido(self, client: TestClient, auth_header_it_admin, year):
        response = client.get(f"/api/export?year={year}", headers=auth_header_it_admin)
        assert response.status_code == 400
        assert response.json()["error"] == "Parámetro year no válido"

    def test_año_sin_reservas(self, client: TestClient, auth_header_it_admin):
        assert client.get("/api/export?year=1999", headers=auth_header_it_admin).json() == []


class TestEndpointsDelPanel:

    def test_panel_completo(self, client: TestClient, db: Session, resident, auth_header_it_admin):
        add_booking(db, apartment=12, on=date.today())
        response = client.get("/api/dashboard", headers=auth_header_it_admin)

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"userStats", "bookingStats"}
        assert "loginActivity" in data["userStats"]
        assert data["bookingStats"]["totalBookings"] == 1

    def test_login_stats(self, client: TestClient, auth_header_it_admin):
        response = client.get("/api/dashboard/login-stats", headers=auth_header_it_admin)
        assert response.status_code == 200
        assert response.json()["loginActivity"]["totalLogins"] == 0
