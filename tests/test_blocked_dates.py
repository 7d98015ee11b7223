"""
Test suite de bloqueos por junta general.
"""
import json

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models import ActivityAction, ActivityLog, BlockedDate, NotificationLog, PushSubscription

from conftest import future_date

WEDNESDAY = 2


def block_payload(**overrides):
    payload = {
        "date": future_date(WEDNESDAY).isoformat(),
        "mealType": "dinner",
        "reason": "Junta general ordinaria",
        "prepararFuego": False,
    }
    payload.update(overrides)
    return payload


class TestCrearBloqueo:

    def test_admin_it_bloquea_turno(self, client: TestClient, db: Session, auth_header_it_admin, sent_pushes):
        response = client.post("/api/blocked-dates", json=block_payload(), headers=auth_header_it_admin)

        assert response.status_code == 201
        data = response.json()
        assert data["reason"] == "Junta general ordinaria"
        assert data["mealType"] == "dinner"
        log = db.query(ActivityLog).one()
        assert log.action == ActivityAction.create
        assert "Junta general ordinaria" in log.details
        # Sin fuego no hay aviso al conserje
        assert db.query(NotificationLog).count() == 0
        assert sent_pushes == []

    def test_solapamiento_con_dia_completo(self, client: TestClient, auth_header_it_admin):
        """
        GIVEN: Bloqueo de la cena
        WHEN: Se intenta bloquear el día completo (both)
        THEN: 409 porque el día completo cubre la cena
        """
        client.post("/api/blocked-dates", json=block_payload(), headers=auth_header_it_admin)
        response = client.post("/api/blocked-dates", json=block_payload(mealType="both"), headers=auth_header_it_admin)

        assert response.status_code == 409

    def test_comida_y_cena_por_separado(self, client: TestClient, auth_header_it_admin):
        client.post("/api/blocked-dates", json=block_payload(), headers=auth_header_it_admin)
        response = client.post("/api/blocked-dates", json=block_payload(mealType="lunch"), headers=auth_header_it_admin)

        assert response.status_code == 201

    def test_motivo_no_valido(self, client: TestClient, auth_header_it_admin):
        response = client.post(
            "/api/blocked-dates", json=block_payload(reason="Cumpleaños"), headers=auth_header_it_admin
        )
        assert response.status_code == 400

    def test_admin_no_bloquea(self, client: TestClient, auth_header_admin):
        assert client.post("/api/blocked-dates", json=block_payload(), headers=auth_header_admin).status_code == 403

    def test_con_fuego_avisa_al_conserje(
        self, client: TestClient, db: Session, conserje, auth_header_it_admin, sent_pushes, monkeypatch
    ):
        """
        GIVEN: Conserje con un dispositivo suscrito
        WHEN: Admin IT bloquea un turno con preparación de fuego
        THEN:
            - NotificationLog con el motivo en el título
            - Push enviado al dispositivo del conserje
        """
        from app.core.config import settings

        monkeypatch.setattr(settings, "vapid_private_key", "clave-de-prueba")
        db.add(PushSubscription(user_id=conserje.id, endpoint="https://push.test/conserje", p256dh="k", auth="a"))
        db.commit()

        response = client.post(
            "/api/blocked-dates", json=block_payload(prepararFuego=True), headers=auth_header_it_admin
        )

        assert response.status_code == 201
        notification = db.query(NotificationLog).one()
        assert notification.title == "🔔 Reserva para Junta general ordinaria"
        assert "preparación de fuego" in notification.body
        assert notification.tag == f"blocked-date-{response.json()['id']}"

        assert len(sent_pushes) == 1
        assert json.loads(sent_pushes[0]["data"])["data"]["url"] == "/notifications"


class TestConsultarYEliminar:

    def test_listado_por_fecha(self, client: TestClient, auth_header_it_admin, auth_header_resident):
        day = future_date(WEDNESDAY)
        client.post("/api/blocked-dates", json=block_payload(), headers=auth_header_it_admin)
        client.post(
            "/api/blocked-dates",
            json=block_payload(date=(future_date(WEDNESDAY, min_days=20)).isoformat()),
            headers=auth_header_it_admin,
        )

        everything = client.get("/api/blocked-dates", headers=auth_header_resident)
        only_day = client.get(f"/api/blocked-dates?date={day.isoformat()}", headers=auth_header_resident)

        assert len(everything.json()) == 2
        assert [b["date"] for b in only_day.json()] == [day.isoformat()]

    def test_eliminar_bloqueo(self, client: TestClient, db: Session, auth_header_it_admin):
        block_id = client.post("/api/blocked-dates", json=block_payload(), headers=auth_header_it_admin).json()["id"]

        response = client.delete(f"/api/blocked-dates/{block_id}", headers=auth_header_it_admin)

        assert response.status_code == 200
        assert db.query(BlockedDate).count() == 0
        actions = [log.action for log in db.query(ActivityLog).order_by(ActivityLog.id).all()]
        assert actions == [ActivityAction.create, ActivityAction.delete]

    def test_eliminar_inexistente(self, client: TestClient, auth_header_it_admin):
        assert client.delete("/api/blocked-dates/999", headers=auth_header_it_admin).status_code == 404

    def test_tras_eliminar_se_puede_reservar(
        self, client: TestClient, auth_header_it_admin, auth_header_resident
    ):
        day = future_date(WEDNESDAY)
        block_id = client.post(
            "/api/blocked-dates", json=block_payload(mealType="both"), headers=auth_header_it_admin
        ).json()["id"]
        booking = {"apartmentNumber": 12, "date": day.isoformat(), "mealType": "dinner", "numberOfPeople": 2, "tables": [3]}

        assert client.post("/api/bookings", json=booking, headers=auth_header_resident).status_code == 409

        client.delete(f"/api/blocked-dates/{block_id}", headers=auth_header_it_admin)
        assert client.post("/api/bookings", json=booking, headers=auth_header_resident).status_code == 201
