# app/services/blocked_date_service.py
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import ConflictError, NotFoundError
from app.crud.activity_log import add_activity
from app.crud.blocked_date import get_blocked_date, list_blocked_dates
from app.models.activity_log import ActivityAction
from app.models.blocked_date import BlockedDate
from app.models.user import User
from app.schemas.blocked_date import BlockedDateCreate
from app.utils.formatting import format_date_es, meal_label
from app.utils.logger import logger


def create_blocked_date(db: Session, user: User, payload: BlockedDateCreate) -> BlockedDate:
    for existing in list_blocked_dates(db, payload.date):
        if existing.covers(payload.meal_type):
            raise ConflictError(
                "Ya existe un bloqueo para ese turno",
                f"{format_date_es(existing.date)} · {meal_label(existing.meal_type)} · {existing.reason.value}",
            )

    block = BlockedDate(
        date=payload.date,
        meal_type=payload.meal_type,
        reason=payload.reason,
        preparar_fuego=payload.preparar_fuego,
        created_by=user.id,
    )
    db.add(block)

    fuego = " con preparación de fuego" if payload.preparar_fuego else ""
    add_activity(
        db,
        ActivityAction.create,
        (
            f"Admin IT {user.name} creó bloqueo de {meal_label(payload.meal_type)} "
            f"el {format_date_es(payload.date)} por: {payload.reason.value}{fuego}"
        ),
        user_id=user.id,
    )
    db.commit()
    db.refresh(block)
    logger.info("Bloqueo %s creado (%s %s)", block.id, block.date, block.meal_type)
    return block


def concierge_notice(block: BlockedDate) -> Optional[Dict[str, Any]]:
    if not block.preparar_fuego:
        return None
    return {
        "title": f"🔔 Reserva para {block.reason.value}",
        "body": f"{format_date_es(block.date)} · {meal_label(block.meal_type)} · con preparación de fuego",
        "tag": f"blocked-date-{block.id}",
        "data": {"url": "/notifications"},
    }


def delete_blocked_date(db: Session, user: User, block_id: int) -> None:
    block = get_blocked_date(db, block_id)
    if block is None:
        raise NotFoundError("Bloqueo no encontrado")

    add_activity(
        db,
        ActivityAction.delete,
        (
            f"Admin IT {user.name} eliminó el bloqueo de {meal_label(block.meal_type)} "
            f"el {format_date_es(block.date)} ({block.reason.value})"
        ),
        user_id=user.id,
    )
    db.delete(block)
    db.commit()
    logger.info("Bloqueo %s eliminado", block_id)
