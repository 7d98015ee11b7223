# app/services/password_reset_service.py
"""
Recuperación de contraseña con token de un solo uso.

- Se genera un token aleatorio; sólo se guarda su hash SHA-256.
- Cada usuario tiene como máximo un token `pending` (una nueva solicitud lo
  reemplaza).
- Al consumirse pasa a `completed`; los vencidos pasan a `expired`.
- Los registros se eliminan `password_reset_retention_days` días después de
  su expiración.
"""
import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from urllib.parse import quote

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import ValidationFailedError
from app.core.security import hash_password
from app.crud import user as user_crud
from app.models.password_reset import PasswordReset, ResetStatus
from app.services.email_service import send_password_reset_email
from app.utils.logger import logger

GENERIC_MESSAGE = "Si su email existe en nuestro sistema, recibirá instrucciones para restablecer la contraseña."
INVALID_LINK = "Enlace inválido o expirado"


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def request_password_reset(db: Session, email: str, base_url: Optional[str] = None) -> Dict:
    """La respuesta es la misma exista o no la cuenta."""
    response: Dict = {"success": True, "message": GENERIC_MESSAGE}

    user = user_crud.get_user_by_email(db, email)
    if user is None:
        logger.info("Solicitud de recuperación para email desconocido")
        return response

    token = secrets.token_hex(32)
    reset = (
        db.query(PasswordReset)
        .filter(PasswordReset.user_id == user.id, PasswordReset.status == ResetStatus.pending)
        .first()
    )
    if reset is None:
        reset = PasswordReset(user_id=user.id, status=ResetStatus.pending)
        db.add(reset)
    reset.token = hash_token(token)
    reset.expires_at = _utcnow() + timedelta(minutes=settings.password_reset_expire_minutes)
    db.commit()

    base = (base_url or settings.public_base_url).rstrip("/")
    reset_url = f"{base}/auth/new-password?token={token}&email={quote(user.email)}"
    send_password_reset_email(user.email, reset_url, user.name)

    if settings.environment == "development":
        response["resetUrl"] = reset_url
    return response


def complete_password_reset(db: Session, token: str, email: str, password: str) -> None:
    user = user_crud.get_user_by_email(db, email)
    if user is None:
        raise ValidationFailedError(INVALID_LINK)

    reset = (
        db.query(PasswordReset)
        .filter(
            PasswordReset.user_id == user.id,
            PasswordReset.token == hash_token(token),
            PasswordReset.status == ResetStatus.pending,
            PasswordReset.expires_at > _utcnow(),
        )
        .first()
    )
    if reset is None:
        raise ValidationFailedError(INVALID_LINK)

    # El UPDATE condicionado al estado evita que dos peticiones consuman el mismo token
    consumed = (
        db.query(PasswordReset)
        .filter(PasswordReset.id == reset.id, PasswordReset.status == ResetStatus.pending)
        .update(
            {PasswordReset.status: ResetStatus.completed, PasswordReset.completed_at: _utcnow()},
            synchronize_session=False,
        )
    )
    if consumed != 1:
        db.rollback()
        raise ValidationFailedError(INVALID_LINK)

    user.hashed_password = hash_password(password)
    db.commit()
    logger.info("Contraseña restablecida para %s", user.email)


def purge_password_resets(db: Session) -> Dict[str, int]:
    now = _utcnow()
    expired = (
        db.query(PasswordReset)
        .filter(PasswordReset.status == ResetStatus.pending, PasswordReset.expires_at <= now)
        .update({PasswordReset.status: ResetStatus.expired}, synchronize_session=False)
    )
    cutoff = now - timedelta(days=settings.password_reset_retention_days)
    deleted = (
        db.query(PasswordReset)
        .filter(PasswordReset.expires_at <= cutoff)
        .delete(synchronize_session=False)
    )
    db.commit()
    if expired or deleted:
        logger.info("Tokens de recuperación: %s expirados, %s eliminados", expired, deleted)
    return {"expired": expired, "deleted": deleted}
