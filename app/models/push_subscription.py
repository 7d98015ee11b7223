# app/models/push_subscription.py
from sqlalchemy import Column, BigInteger, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func

from app.db.base import Base

_pk = BigInteger().with_variant(Integer, "sqlite")


class PushSubscription(Base):
    """Suscripción Web Push de un navegador/dispositivo (una fila por endpoint)."""
    __tablename__ = "push_subscriptions"

    id = Column(_pk, primary_key=True, autoincrement=True)
    user_id = Column(_pk, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    endpoint = Column(String(767), nullable=False, unique=True)
    p256dh = Column(String(255), nullable=False)
    auth = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def as_webpush_info(self) -> dict:
        return {"endpoint": self.endpoint, "keys": {"p256dh": self.p256dh, "auth": self.auth}}
