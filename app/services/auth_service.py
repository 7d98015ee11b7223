# app/services/auth_service.py
"""
Registro e inicio de sesión.

Cada intento de login deja un LoginEvent (éxito o fallo) con IP, navegador y
tipo de dispositivo.
"""
from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import Roles
from app.core.exceptions import ConflictError, ValidationFailedError
from app.core.security import hash_password, verify_password
from app.crud import user as user_crud
from app.models.login_event import LoginEvent
from app.models.user import User
from app.schemas.user import UserCreate
from app.utils.logger import logger
from app.utils.user_agent import detect_browser, detect_device_type


def register_user(db: Session, payload: UserCreate, *, commit: bool = True) -> User:
    if payload.role == Roles.USER:
        if payload.apartment_number is None:
            raise ValidationFailedError("El número de apartamento es obligatorio para residentes")
        if user_crud.get_resident_by_apartment(db, payload.apartment_number):
            raise ConflictError("Este apartamento ya tiene un usuario registrado")

    if user_crud.get_user_by_email(db, payload.email):
        raise ConflictError("El email ya está registrado")

    user = user_crud.create_user(
        db,
        name=payload.name,
        email=payload.email,
        hashed_password=hash_password(payload.password),
        role=payload.role,
        apartment_number=payload.apartment_number,
        commit=commit,
    )
    logger.info("Usuario registrado: %s (%s)", user.email, user.role)
    return user


def record_login_event(
    db: Session,
    *,
    user_id: Optional[int],
    ip_address: str,
    user_agent: str,
    success: bool,
    failure_reason: Optional[str] = None,
) -> LoginEvent:
    event = LoginEvent(
        user_id=user_id,
        ip_address=ip_address or "unknown",
        user_agent=(user_agent or "unknown")[:512],
        browser=detect_browser(user_agent),
        device_type=detect_device_type(user_agent),
        location="Unknown",
        success=success,
        failure_reason=failure_reason,
    )
    db.add(event)
    db.commit()
    return event


def authenticate(db: Session, email: str, password: str, *, ip_address: str, user_agent: str) -> Optional[User]:
    user = user_crud.get_user_by_email(db, email)

    if user is None:
        record_login_event(
            db, user_id=None, ip_address=ip_address, user_agent=user_agent,
            success=False, failure_reason="user_not_found",
        )
        logger.warning("Intento de login fallido para %s: usuario inexistente", email)
        return None

    if not verify_password(password, user.hashed_password):
        record_login_event(
            db, user_id=user.id, ip_address=ip_address, user_agent=user_agent,
            success=False, failure_reason="invalid_password",
        )
        logger.warning("Intento de login fallido para %s: contraseña incorrecta", email)
        return None

    record_login_event(db, user_id=user.id, ip_address=ip_address, user_agent=user_agent, success=True)
    logger.info("Usuario autenticado: %s", user.email)
    return user
