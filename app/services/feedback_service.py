# app/services/feedback_service.py
import math
from typing import Optional, Tuple, List

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.crud.activity_log import add_activity
from app.models.activity_log import ActivityAction
from app.models.feedback import Feedback, FeedbackStatus, FeedbackType
from app.models.user import User
from app.schemas.feedback import FeedbackCreate
from app.services.email_service import send_feedback_email
from app.utils.logger import logger

MAX_PAGE_SIZE = 100


def submit_feedback(db: Session, user: User, payload: FeedbackCreate) -> Tuple[Feedback, bool]:
    """Guarda el feedback y avisa por email. Devuelve (feedback, email_enviado)."""
    feedback = Feedback(
        name=payload.name,
        email=payload.email,
        apartment_number=user.apartment_number,
        type=payload.type,
        content=payload.content,
        status=FeedbackStatus.new,
        user_id=user.id,
    )
    db.add(feedback)
    add_activity(
        db,
        ActivityAction.create,
        f"{payload.name} envió feedback de tipo {payload.type.value}",
        user_id=user.id,
        apartment_number=user.apartment_number,
    )
    db.commit()
    db.refresh(feedback)

    email_sent = send_feedback_email(
        {
            "name": feedback.name,
            "email": feedback.email,
            "apartment_number": feedback.apartment_number,
            "type": feedback.type.value,
            "content": feedback.content,
        }
    )
    logger.info("Feedback %s recibido (email enviado: %s)", feedback.id, email_sent)
    return feedback, email_sent


def list_feedback(
    db: Session,
    *,
    page: int = 1,
    limit: int = 10,
    status: Optional[FeedbackStatus] = None,
    type: Optional[FeedbackType] = None,
) -> Tuple[List[Feedback], int, int]:
    """Devuelve (feedback, total, total_pages)."""
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    page = max(1, page)

    query = db.query(Feedback)
    if status is not None:
        query = query.filter(Feedback.status == status)
    if type is not None:
        query = query.filter(Feedback.type == type)

    total = query.count()
    items = (
        query.order_by(Feedback.created_at.desc(), Feedback.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return items, total, math.ceil(total / limit) if total else 0


def update_feedback_status(db: Session, user: User, feedback_id: int, status: FeedbackStatus) -> Feedback:
    feedback = db.query(Feedback).filter(Feedback.id == feedback_id).first()
    if feedback is None:
        raise NotFoundError("Feedback no encontrado")

    feedback.status = status
    add_activity(
        db,
        ActivityAction.update,
        f"Admin IT {user.name} cambió el estado del feedback #{feedback.id} a {status.value}",
        user_id=user.id,
    )
    db.commit()
    db.refresh(feedback)
    return feedback
