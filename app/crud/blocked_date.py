# app/crud/blocked_date.py
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.blocked_date import BlockedDate


def get_blocked_date(db: Session, block_id: int) -> Optional[BlockedDate]:
    return db.query(BlockedDate).filter(BlockedDate.id == block_id).first()


def list_blocked_dates(db: Session, on_date: Optional[date] = None) -> List[BlockedDate]:
    query = db.query(BlockedDate)
    if on_date is not None:
        query = query.filter(BlockedDate.date == on_date)
    return query.order_by(BlockedDate.date, BlockedDate.id).all()


def find_block_for_slot(db: Session, on_date: date, meal_type) -> Optional[BlockedDate]:
    """Primer bloqueo de la fecha que afecta al turno (lunch, dinner o both)."""
    for block in list_blocked_dates(db, on_date):
        if block.covers(meal_type):
            return block
    return None
