# app/models/activity_log.py
"""
Modelo de auditoría de acciones administrativas.
Cada mutación de reservas, bloqueos, feedback o usuarios deja un registro.
"""
import enum

from sqlalchemy import Column, BigInteger, Integer, Text, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func

from app.db.append_only import append_only
from app.db.base import Base

_pk = BigInteger().with_variant(Integer, "sqlite")


class ActivityAction(str, enum.Enum):
    create = "create"
    update = "update"
    delete = "delete"
    confirm = "confirm"
    user_create = "user_create"
    user_update = "user_update"
    user_delete = "user_delete"


@append_only()
class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(_pk, primary_key=True, autoincrement=True)
    action = Column(Enum(ActivityAction, native_enum=False, length=20), nullable=False, index=True)
    apartment_number = Column(Integer, nullable=True)

    # Autor de la acción y, en acciones sobre usuarios, el usuario afectado
    user_id = Column(_pk, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    target_user_id = Column(_pk, nullable=True)

    details = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
