# app/models/password_reset.py
"""
Tokens de recuperación de contraseña.

Sólo se guarda el hash SHA-256 del token. Un token `pending` se consume una
única vez (pasa a `completed`); los vencidos pasan a `expired` y todos se
eliminan cuando su expiración supera la ventana de retención.
"""
import enum

from sqlalchemy import Column, BigInteger, Integer, String, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func

from app.db.base import Base

_pk = BigInteger().with_variant(Integer, "sqlite")


class ResetStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"
    expired = "expired"


class PasswordReset(Base):
    __tablename__ = "password_resets"

    id = Column(_pk, primary_key=True, autoincrement=True)
    user_id = Column(_pk, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(64), nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False, index=True)
    status = Column(Enum(ResetStatus, native_enum=False, length=20), nullable=False, default=ResetStatus.pending)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    completed_at = Column(DateTime, nullable=True)
