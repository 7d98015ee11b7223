# app/services/push_service.py
"""
Notificaciones Web Push para el conserje.

Cada envío queda registrado en NotificationLog (historial visible en
/notifications). Las suscripciones que el servicio push responde con 404/410
se eliminan. Los fallos se registran en el log y nunca se propagan: una
reserva o un bloqueo no debe fallar porque falle el push.
"""
import json
import logging
from typing import Any, Dict, Optional

from pywebpush import WebPushException, webpush
from requests.exceptions import RequestException
from sqlalchemy.orm import Session

from app.core.config import Roles, settings
from app.db.session import SessionLocal
from app.models.notification_log import NotificationLog
from app.models.push_subscription import PushSubscription
from app.models.user import User
from app.schemas.notification import PushPayload

logger = logging.getLogger(__name__)

STALE_STATUS_CODES = (404, 410)


def save_subscription(db: Session, user: User, endpoint: str, p256dh: str, auth: str) -> PushSubscription:
    """Alta o actualización por endpoint (el navegador puede renovar las claves)."""
    sub = db.query(PushSubscription).filter(PushSubscription.endpoint == endpoint).first()
    if sub is None:
        sub = PushSubscription(endpoint=endpoint)
        db.add(sub)
    sub.user_id = user.id
    sub.p256dh = p256dh
    sub.auth = auth
    db.commit()
    db.refresh(sub)
    return sub


def remove_subscription(db: Session, user: User, endpoint: str) -> bool:
    deleted = (
        db.query(PushSubscription)
        .filter(PushSubscription.endpoint == endpoint, PushSubscription.user_id == user.id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return bool(deleted)


def _send_one(sub: PushSubscription, data: str) -> Optional[int]:
    """Envía a una suscripción. Devuelve el código HTTP si el envío falló."""
    try:
        webpush(
            subscription_info=sub.as_webpush_info(),
            data=data,
            vapid_private_key=settings.vapid_private_key,
            vapid_claims={"sub": settings.vapid_subject},
        )
    except WebPushException as e:
        status_code = getattr(e.response, "status_code", None)
        if status_code not in STALE_STATUS_CODES:
            logger.error("[push] Error enviando a %s: %s", sub.endpoint, e)
        return status_code or 0
    except (RequestException, ValueError) as e:
        # Relay inalcanzable, timeout o clave VAPID inválida
        logger.error("[push] Fallo de red o de firma enviando a %s: %s", sub.endpoint, e)
        return 0
    return None


def dispatch_to_conserje(db: Session, payload: Dict[str, Any]) -> int:
    """Registra la notificación y la envía a todos los dispositivos del conserje.

    Un fallo en un dispositivo no impide el envío al resto.
    Devuelve el número de envíos correctos.
    """
    notice = PushPayload.model_validate(payload)
    db.add(NotificationLog(title=notice.title, body=notice.body, tag=notice.tag))
    db.commit()

    conserje_ids = [u.id for u in db.query(User.id).filter(User.role == Roles.CONSERJE).all()]
    if not conserje_ids:
        logger.warning("[push] No hay usuario conserje en la base de datos")
        return 0

    subscriptions = db.query(PushSubscription).filter(PushSubscription.user_id.in_(conserje_ids)).all()
    if not subscriptions:
        logger.info("[push] El conserje no tiene suscripciones activas")
        return 0

    if not settings.vapid_private_key:
        logger.warning("[push] VAPID_PRIVATE_KEY no configurada; no se envía")
        return 0

    data = json.dumps(notice.model_dump(exclude_none=True))
    delivered = 0
    for sub in subscriptions:
        failed_status = _send_one(sub, data)
        if failed_status is None:
            delivered += 1
        elif failed_status in STALE_STATUS_CODES:
            logger.info("[push] Eliminando suscripción caducada: %s", sub.endpoint)
            db.delete(sub)
    db.commit()
    return delivered


def send_push_to_conserje(payload: Dict[str, Any]) -> None:
    """Tarea en segundo plano: abre su propia sesión y nunca lanza."""
    db = SessionLocal()
    try:
        dispatch_to_conserje(db, payload)
    except Exception:
        db.rollback()
        logger.exception("[push] Error inesperado notificando al conserje")
    finally:
        db.close()
