# app/models/notification_log.py
from sqlalchemy import Column, BigInteger, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from app.db.append_only import append_only
from app.db.base import Base


@append_only()
class NotificationLog(Base):
    __tablename__ = "notification_logs"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    body = Column(Text, nullable=False)
    tag = Column(String(100), nullable=True)
    sent_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
