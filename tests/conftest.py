"""
Fixtures compartidas: base de datos SQLite en memoria, TestClient con
get_db sobrescrito, usuarios por rol y cabeceras de autenticación.

Los efectos externos (SMTP y Web Push) se sustituyen por dobles.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ENABLE_SCHEDULER", "false")

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Roles
from app.core.security import create_session_token, hash_password
from app.db.session import get_db
from app.main import app
from app.models import Base, User
from app.services import push_service

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "Password123"
# Un único hash para todos los usuarios de prueba (bcrypt es lento)
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


def future_date(weekday: int, min_days: int = 10) -> date:
    """Primera fecha con ese día de la semana (lunes=0) a `min_days` o más de hoy."""
    day = date.today() + timedelta(days=min_days)
    while day.weekday() != weekday:
        day += timedelta(days=1)
    return day


@pytest.fixture
def db() -> Session:
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sent_pushes(monkeypatch):
    """Registra las llamadas a webpush en lugar de enviarlas."""
    calls = []

    def fake_webpush(subscription_info, data, vapid_private_key, vapid_claims):
        calls.append({"subscription_info": subscription_info, "data": data})

    monkeypatch.setattr(push_service, "webpush", fake_webpush)
    monkeypatch.setattr(push_service, "SessionLocal", TestingSessionLocal)
    return calls


@pytest.fixture
def client(db: Session, sent_pushes) -> TestClient:
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def make_user(db: Session, *, name: str, email: str, role: str, apartment_number=None) -> User:
    user = User(
        name=name,
        email=email,
        role=role,
        apartment_number=apartment_number,
        hashed_password=TEST_PASSWORD_HASH,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_header(user: User) -> dict:
    return {"Authorization": f"Bearer {create_session_token(user)}"}


@pytest.fixture
def resident(db: Session) -> User:
    return make_user(db, name="Ana Residente", email="ana@test.com", role=Roles.USER, apartment_number=12)


@pytest.fixture
def other_resident(db: Session) -> User:
    return make_user(db, name="Luis Vecino", email="luis@test.com", role=Roles.USER, apartment_number=20)


@pytest.fixture
def admin(db: Session) -> User:
    return make_user(db, name="Admin Junta", email="admin@test.com", role=Roles.ADMIN)


@pytest.fixture
def manager(db: Session) -> User:
    return make_user(db, name="Gestor", email="manager@test.com", role=Roles.MANAGER)


@pytest.fixture
def it_admin(db: Session) -> User:
    return make_user(db, name="Soporte IT", email="it@test.com", role=Roles.IT_ADMIN)


@pytest.fixture
def conserje(db: Session) -> User:
    return make_user(db, name="Conserje", email="conserje@test.com", role=Roles.CONSERJE)


@pytest.fixture
def auth_header_resident(resident):
    return auth_header(resident)


@pytest.fixture
def auth_header_other_resident(other_resident):
    return auth_header(other_resident)


@pytest.fixture
def auth_header_admin(admin):
    return auth_header(admin)


@pytest.fixture
def auth_header_manager(manager):
    return auth_header(manager)


@pytest.fixture
def auth_header_it_admin(it_admin):
    return auth_header(it_admin)


@pytest.fixture
def auth_header_conserje(conserje):
    return auth_header(conserje)
