# app/models/user.py
"""
Modelo de Usuario.

El número de apartamento sólo es único entre residentes (role=user).
`resident_slot` vale True para residentes y NULL para el resto, de modo que
la restricción UNIQUE(apartment_number, resident_slot) ignora a los demás
roles (los NULL no colisionan en MySQL, PostgreSQL ni SQLite).
"""
from sqlalchemy import Column, BigInteger, Integer, String, Boolean, DateTime, UniqueConstraint, event
from sqlalchemy.orm import validates
from sqlalchemy.sql import func

from app.core.config import Roles
from app.db.base import Base

MIN_APARTMENT = 1
MAX_APARTMENT = 48


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("apartment_number", "resident_slot", name="uq_users_resident_apartment"),
    )

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(150), nullable=False)
    apartment_number = Column(Integer, nullable=True)
    resident_slot = Column(Boolean, nullable=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Roles.USER, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @validates("email")
    def _normalize_email(self, key, value):
        return value.strip().lower() if value else value

    @validates("role")
    def _validate_role(self, key, value):
        if value not in Roles.ALL:
            raise ValueError(f"Rol no válido: {value}")
        return value

    @validates("apartment_number")
    def _validate_apartment(self, key, value):
        if value is not None and not MIN_APARTMENT <= value <= MAX_APARTMENT:
            raise ValueError("El número de apartamento debe estar entre 1 y 48")
        return value

    @property
    def is_resident(self) -> bool:
        return self.role == Roles.USER


@event.listens_for(User, "before_insert")
@event.listens_for(User, "before_update")
def _sync_resident_slot(mapper, connection, target: User):
    if target.role == Roles.USER:
        if target.apartment_number is None:
            raise ValueError("El número de apartamento es obligatorio para residentes")
        target.resident_slot = True
    else:
        target.resident_slot = None
