"""
Test suite de autenticación: registro, login con auditoría y recuperación
de contraseña con token de un solo uso.
"""
from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import decode_access_token, verify_password
from app.models import LoginEvent, PasswordReset, ResetStatus, User
from app.services.password_reset_service import GENERIC_MESSAGE, hash_token, purge_password_resets

from conftest import TEST_PASSWORD

IPHONE_UA = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
)


class TestRegistro:

    def test_registro_de_residente(self, client: TestClient, db: Session):
        response = client.post(
            "/api/auth/register",
            json={"name": "Marta", "email": "Marta@Test.com", "password": "Password123", "apartmentNumber": 7},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "marta@test.com"
        assert data["role"] == "user"
        assert "hashedPassword" not in data
        assert db.query(User).filter(User.email == "marta@test.com").one().resident_slot is True

    def test_email_duplicado(self, client: TestClient, resident):
        response = client.post(
            "/api/auth/register",
            json={"name": "Otra", "email": "ana@test.com", "password": "Password123", "apartmentNumber": 8},
        )
        assert response.status_code == 409

    def test_apartamento_duplicado(self, client: TestClient, resident):
        response = client.post(
            "/api/auth/register",
            json={"name": "Otra", "email": "otra@test.com", "password": "Password123", "apartmentNumber": 12},
        )
        assert response.status_code == 409
        assert response.json()["error"] == "Este apartamento ya tiene un usuario registrado"

    def test_residente_sin_apartamento(self, client: TestClient):
        response = client.post(
            "/api/auth/register", json={"name": "Sin", "email": "sin@test.com", "password": "Password123"}
        )
        assert response.status_code == 400

    def test_contraseña_corta(self, client: TestClient):
        response = client.post(
            "/api/auth/register",
            json={"name": "Corta", "email": "corta@test.com", "password": "123", "apartmentNumber": 3},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Error de validación"

    def test_rol_privilegiado_requiere_it_admin(self, client: TestClient, auth_header_it_admin):
        payload = {"name": "Nuevo", "email": "nuevo@test.com", "password": "Password123", "role": "admin"}

        assert client.post("/api/auth/register", json=payload).status_code == 403

        response = client.post("/api/auth/register", json=payload, headers=auth_header_it_admin)
        assert response.status_code == 201
        assert response.json()["role"] == "admin"


class TestLogin:

    def test_login_correcto(self, client: TestClient, db: Session, resident):
        """
        GIVEN: Residente registrado
        WHEN: Inicia sesión desde un iPhone tras un proxy
        THEN:
            - JWT con rol y apartamento
            - Cookie de sesión HttpOnly
            - LoginEvent exitoso con dispositivo, navegador e IP
        """
        response = client.post(
            "/api/auth/login",
            json={"email": "ana@test.com", "password": TEST_PASSWORD},
            headers={"User-Agent": IPHONE_UA, "X-Forwarded-For": "203.0.113.9, 10.0.0.1"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["tokenType"] == "bearer"
        assert data["user"]["apartmentNumber"] == 12

        claims = decode_access_token(data["accessToken"])
        assert claims["sub"] == str(resident.id)
        assert claims["role"] == "user"
        assert claims["apartmentNumber"] == 12
        assert settings.session_cookie_name in response.cookies

        event = db.query(LoginEvent).one()
        assert event.success is True
        assert event.user_id == resident.id
        assert event.device_type == "mobile"
        assert event.browser == "Safari"
        assert event.ip_address == "203.0.113.9"

    def test_contraseña_incorrecta(self, client: TestClient, db: Session, resident):
        response = client.post("/api/auth/login", json={"email": "ana@test.com", "password": "mala-clave"})

        assert response.status_code == 401
        event = db.query(LoginEvent).one()
        assert event.success is False
        assert event.failure_reason == "invalid_password"

    def test_usuario_inexistente(self, client: TestClient, db: Session):
        response = client.post("/api/auth/login", json={"email": "nadie@test.com", "password": "Password123"})

        assert response.status_code == 401
        event = db.query(LoginEvent).one()
        assert event.user_id is None
        assert event.failure_reason == "user_not_found"

    def test_sesion_y_logout(self, client: TestClient, resident):
        client.post("/api/auth/login", json={"email": "ana@test.com", "password": TEST_PASSWORD})
        assert client.get("/api/auth/session").status_code == 200

        response = client.post("/api/auth/logout")
        assert response.status_code == 200
        client.cookies.clear()
        assert client.get("/api/auth/session").status_code == 401


class TestRecuperacionDeContraseña:

    @pytest.fixture
    def dev_mode(self, monkeypatch):
        monkeypatch.setattr(settings, "environment", "development")

    def _request_token(self, client: TestClient, email: str = "ana@test.com"):
        response = client.post("/api/auth/reset-password", json={"email": email})
        assert response.status_code == 200
        query = parse_qs(urlparse(response.json()["resetUrl"]).query)
        return query["token"][0], query["email"][0]

    def test_respuesta_identica_exista_o_no(self, client: TestClient, resident):
        existing = client.post("/api/auth/reset-password", json={"email": "ana@test.com"})
        missing = client.post("/api/auth/reset-password", json={"email": "nadie@test.com"})

        assert existing.status_code == missing.status_code == 200
        assert existing.json() == missing.json() == {"success": True, "message": GENERIC_MESSAGE}

    def test_solo_se_guarda_el_hash(self, client: TestClient, db: Session, resident, dev_mode):
        token, _ = self._request_token(client)

        reset = db.query(PasswordReset).one()
        assert reset.token == hash_token(token)
        assert reset.token != token
        assert reset.status == ResetStatus.pending

    def test_nueva_solicitud_reemplaza_token(self, client: TestClient, db: Session, resident, dev_mode):
        first, _ = self._request_token(client)
        second, _ = self._request_token(client)

        assert db.query(PasswordReset).count() == 1
        response = client.post(
            "/api/auth/new-password", json={"token": first, "email": "ana@test.com", "password": "NuevaClave1"}
        )
        assert response.status_code == 400

    def test_token_de_un_solo_uso(self, client: TestClient, db: Session, resident, dev_mode):
        """
        GIVEN: Token de recuperación válido
        WHEN: Se usa dos veces
        THEN:
            - La primera cambia la contraseña y marca el token `completed`
            - La segunda responde 400 "Enlace inválido o expirado"
        """
        token, email = self._request_token(client)
        payload = {"token": token, "email": email, "password": "NuevaClave1"}

        response = client.post("/api/auth/new-password", json=payload)
        assert response.status_code == 200
        assert response.json()["success"] is True

        db.expire_all()
        user = db.query(User).filter(User.email == "ana@test.com").one()
        assert verify_password("NuevaClave1", user.hashed_password)
        reset = db.query(PasswordReset).one()
        assert reset.status == ResetStatus.completed
        assert reset.completed_at is not None

        response = client.post("/api/auth/new-password", json=payload)
        assert response.status_code == 400
        assert response.json()["error"] == "Enlace inválido o expirado"

    def test_vencimiento_en_utc_sin_zona(self, client: TestClient, db: Session, resident, dev_mode):
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        self._request_token(client)

        reset = db.query(PasswordReset).one()
        assert reset.expires_at.tzinfo is None
        expected = before + timedelta(minutes=settings.password_reset_expire_minutes)
        assert timedelta(0) <= reset.expires_at - expected < timedelta(minutes=1)

    def test_token_expirado(self, client: TestClient, db: Session, resident, dev_mode):
        token, email = self._request_token(client)
        reset = db.query(PasswordReset).one()
        reset.expires_at = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(minutes=1)
        db.commit()

        response = client.post(
            "/api/auth/new-password", json={"token": token, "email": email, "password": "NuevaClave1"}
        )
        assert response.status_code == 400

    def test_email_distinto(self, client: TestClient, resident, other_resident, dev_mode):
        token, _ = self._request_token(client)
        response = client.post(
            "/api/auth/new-password", json={"token": token, "email": "luis@test.com", "password": "NuevaClave1"}
        )
        assert response.status_code == 400

    def test_sin_reset_url_fuera_de_desarrollo(self, client: TestClient, resident):
        response = client.post("/api/auth/reset-password", json={"email": "ana@test.com"})
        assert "resetUrl" not in response.json()


class TestPurgaDeTokens:

    def test_expira_y_elimina(self, db: Session, resident):
        """
        GIVEN:
            - Token pendiente vencido hace 1 hora
            - Token vencido hace 31 días
            - Token vigente
        WHEN: Se ejecuta la purga periódica
        THEN: 1 pasa a expired, 1 se elimina y el vigente no cambia
        """
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        recent = PasswordReset(user_id=resident.id, token="a" * 64, expires_at=now - timedelta(hours=1))
        old = PasswordReset(
            user_id=resident.id, token="b" * 64, expires_at=now - timedelta(days=31), status=ResetStatus.completed
        )
        valid = PasswordReset(user_id=resident.id, token="c" * 64, expires_at=now + timedelta(minutes=30))
        db.add_all([recent, old, valid])
        db.commit()

        result = purge_password_resets(db)

        assert result == {"expired": 1, "deleted": 1}
        db.expire_all()
        statuses = {r.token[0]: r.status for r in db.query(PasswordReset).all()}
        assert statuses == {"a": ResetStatus.expired, "c": ResetStatus.pending}
