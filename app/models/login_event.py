# app/models/login_event.py
from sqlalchemy import Column, BigInteger, Integer, String, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func

from app.db.append_only import append_only
from app.db.base import Base

_pk = BigInteger().with_variant(Integer, "sqlite")


@append_only()
class LoginEvent(Base):
    """
    Registro de auditoría de cada intento de inicio de sesión.
    Se crea tanto para intentos exitosos como fallidos.
    """
    __tablename__ = "login_events"

    id = Column(_pk, primary_key=True, autoincrement=True)

    # NULL cuando el email no corresponde a ningún usuario
    user_id = Column(_pk, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    ip_address = Column(String(64), nullable=False)
    user_agent = Column(String(512), nullable=False)
    browser = Column(String(50), nullable=False)
    device_type = Column(String(10), nullable=False)  # desktop, mobile, tablet
    location = Column(String(150), nullable=False, default="Unknown")
    geo_data = Column(JSON, nullable=True)
    # Estructura: {"country": ..., "city": ..., "region": ..., "latitude": ..., "longitude": ...}

    success = Column(Boolean, nullable=False, index=True)
    failure_reason = Column(String(100), nullable=True)
