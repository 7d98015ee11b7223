# app/api/v1/routers/activity.py
import math

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.security import get_current_user
from app.crud.activity_log import list_activity
from app.db.session import get_db
from app.models.user import User
from app.schemas.activity import ActivityLogRead, ActivityPage

router = APIRouter()


@router.get("", response_model=ActivityPage)
def list_all(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    logs, total = list_activity(db, skip=(page - 1) * limit, limit=limit)
    return ActivityPage(
        logs=[ActivityLogRead.model_validate(log) for log in logs],
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0,
        total_count=total,
    )
