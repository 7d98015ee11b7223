# app/api/v1/routers/notifications.py
"""
Historial de notificaciones y suscripciones Web Push del conserje.
"""
import math

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.config import Roles, settings
from app.core.security import get_current_user, require_role
from app.db.session import get_db
from app.models.notification_log import NotificationLog
from app.models.user import User
from app.schemas.common import SuccessResponse
from app.schemas.notification import (
    NotificationPage,
    NotificationRead,
    PushSubscribeRequest,
    PushUnsubscribeRequest,
)
from app.services import push_service

router = APIRouter()
push_router = APIRouter()


@router.get("", response_model=NotificationPage)
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(15, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(Roles.CONSERJE)),
):
    query = db.query(NotificationLog)
    total = query.count()
    items = (
        query.order_by(NotificationLog.sent_at.desc(), NotificationLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return NotificationPage(
        notifications=[NotificationRead.model_validate(n) for n in items],
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0,
        total_count=total,
    )


@push_router.post("/subscribe", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
def subscribe(
    payload: PushSubscribeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(Roles.CONSERJE)),
):
    push_service.save_subscription(db, current_user, payload.endpoint, payload.keys.p256dh, payload.keys.auth)
    return SuccessResponse(message="Suscripción registrada")


@push_router.delete("/subscribe", response_model=SuccessResponse)
def unsubscribe(
    payload: PushUnsubscribeRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(Roles.CONSERJE)),
):
    removed = push_service.remove_subscription(db, current_user, payload.endpoint)
    return SuccessResponse(success=removed, message="Suscripción eliminada" if removed else "Suscripción no encontrada")


@push_router.get("/vapid-public-key")
def vapid_public_key(current_user: User = Depends(get_current_user)):
    return {"publicKey": settings.vapid_public_key}
