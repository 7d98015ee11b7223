import datetime as dt
from typing import Optional

from app.models.blocked_date import BlockedMealType, JuntaReason
from app.schemas.common import CamelModel


class BlockedDateCreate(CamelModel):
    date: dt.date
    meal_type: BlockedMealType
    reason: JuntaReason
    preparar_fuego: bool = False


class BlockedDateRead(CamelModel):
    id: int
    date: dt.date
    meal_type: BlockedMealType
    reason: JuntaReason
    preparar_fuego: bool
    created_by: Optional[int] = None
    created_at: Optional[dt.datetime] = None
