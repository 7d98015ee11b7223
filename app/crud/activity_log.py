# app/crud/activity_log.py
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.models.activity_log import ActivityAction, ActivityLog


def add_activity(
    db: Session,
    action: ActivityAction,
    details: str,
    *,
    user_id: Optional[int] = None,
    apartment_number: Optional[int] = None,
    target_user_id: Optional[int] = None,
) -> ActivityLog:
    """Agrega el registro a la sesión; el commit lo hace quien llama."""
    entry = ActivityLog(
        action=action,
        details=details,
        user_id=user_id,
        apartment_number=apartment_number,
        target_user_id=target_user_id,
    )
    db.add(entry)
    return entry


def list_activity(db: Session, skip: int = 0, limit: int = 10) -> Tuple[List[ActivityLog], int]:
    query = db.query(ActivityLog)
    total = query.count()
    logs = (
        query.order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )
    return logs, total
