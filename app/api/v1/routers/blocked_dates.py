# app/api/v1/routers/blocked_dates.py
import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.config import Roles
from app.core.security import get_current_user, require_role
from app.crud.blocked_date import list_blocked_dates
from app.db.session import get_db
from app.models.user import User
from app.schemas.blocked_date import BlockedDateCreate, BlockedDateRead
from app.schemas.common import MessageResponse
from app.services import blocked_date_service
from app.services.push_service import send_push_to_conserje

router = APIRouter()


@router.get("", response_model=List[BlockedDateRead])
def list_all(
    date: Optional[dt.date] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return list_blocked_dates(db, date)


@router.post("", response_model=BlockedDateRead, status_code=status.HTTP_201_CREATED)
def create(
    payload: BlockedDateCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(Roles.IT_ADMIN)),
):
    block = blocked_date_service.create_blocked_date(db, current_user, payload)
    notice = blocked_date_service.concierge_notice(block)
    if notice:
        background_tasks.add_task(send_push_to_conserje, notice)
    return block


@router.delete("/{block_id}", response_model=MessageResponse)
def delete(
    block_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role(Roles.IT_ADMIN)),
):
    blocked_date_service.delete_blocked_date(db, current_user, block_id)
    return {"message": "Bloqueo eliminado correctamente"}
