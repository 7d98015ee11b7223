# app/api/v1/routers/feedback.py
"""
Feedback de usuarios. No hay endpoint de borrado: los registros sólo
cambian de estado.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.config import Roles
from app.core.security import get_current_user, require_role
from app.db.session import get_db
from app.models.feedback import FeedbackStatus, FeedbackType
from app.models.user import User
from app.schemas.feedback import FeedbackCreate, FeedbackCreated, FeedbackPage, FeedbackRead, FeedbackStatusUpdate
from app.services import feedback_service

router = APIRouter()


@router.post("", response_model=FeedbackCreated, status_code=status.HTTP_201_CREATED)
def submit(payload: FeedbackCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    _, email_sent = feedback_service.submit_feedback(db, current_user, payload)
    return FeedbackCreated(message="Feedback enviado correctamente", email_sent=email_sent)


@router.get("", response_model=FeedbackPage)
def list_all(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=feedback_service.MAX_PAGE_SIZE),
    feedback_status: Optional[FeedbackStatus] = Query(None, alias="status"),
    feedback_type: Optional[FeedbackType] = Query(None, alias="type"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(Roles.IT_ADMIN)),
):
    items, total, total_pages = feedback_service.list_feedback(
        db, page=page, limit=limit, status=feedback_status, type=feedback_type
    )
    return FeedbackPage(
        feedback=[FeedbackRead.model_validate(f) for f in items],
        page=page,
        limit=limit,
        total_pages=total_pages,
        total_count=total,
    )


@router.put("/{feedback_id}", response_model=FeedbackRead)
def update_status(
    feedback_id: int,
    payload: FeedbackStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(Roles.IT_ADMIN)),
):
    return feedback_service.update_feedback_status(db, current_user, feedback_id, payload.status)
