# app/models/blocked_date.py
import enum

from sqlalchemy import Column, BigInteger, Integer, Boolean, Date, DateTime, Enum, ForeignKey, Index
from sqlalchemy.sql import func

from app.db.base import Base

_pk = BigInteger().with_variant(Integer, "sqlite")


class BlockedMealType(str, enum.Enum):
    lunch = "lunch"
    dinner = "dinner"
    both = "both"


class JuntaReason(str, enum.Enum):
    ordinaria = "Junta general ordinaria"
    extraordinaria = "Junta general extraordinaria"


class BlockedDate(Base):
    """Bloqueo de un turno por junta general; impide reservar ese turno."""
    __tablename__ = "blocked_dates"
    __table_args__ = (
        Index("ix_blocked_dates_slot", "date", "meal_type"),
    )

    id = Column(_pk, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False)
    meal_type = Column(Enum(BlockedMealType, native_enum=False, length=10), nullable=False)
    reason = Column(
        Enum(JuntaReason, native_enum=False, values_callable=lambda e: [m.value for m in e], length=50),
        nullable=False,
    )
    preparar_fuego = Column(Boolean, nullable=False, default=False)
    created_by = Column(_pk, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def covers(self, meal_type) -> bool:
        """Indica si el bloqueo afecta al turno dado (lunch, dinner o both)."""
        kind = BlockedMealType(self.meal_type).value
        requested = getattr(meal_type, "value", meal_type)
        return kind == "both" or requested == "both" or kind == requested
