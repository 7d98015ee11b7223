# app/models/booking.py
"""
Reservas de mesas para un turno (fecha + comida/cena).

Cada mesa reservada es una fila de `booking_tables` con la fecha y el turno
copiados de la reserva. La restricción UNIQUE(date, meal_type, table_number,
hold) la aplica la base de datos de forma atómica: `hold` es True mientras la
reserva no está cancelada y NULL cuando se libera la mesa.
"""
import enum

from sqlalchemy import (
    Column, BigInteger, Integer, String, Boolean, Date, DateTime, Text,
    ForeignKey, UniqueConstraint, Index, Enum,
)
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func

from app.db.base import Base

MIN_TABLE = 1
MAX_TABLE = 6

_pk = BigInteger().with_variant(Integer, "sqlite")


class MealType(str, enum.Enum):
    lunch = "lunch"
    dinner = "dinner"


class BookingStatus(str, enum.Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_slot", "date", "meal_type"),
    )

    id = Column(_pk, primary_key=True, autoincrement=True)
    apartment_number = Column(Integer, nullable=False, index=True)
    date = Column(Date, nullable=False)
    meal_type = Column(Enum(MealType, native_enum=False, length=10), nullable=False)
    number_of_people = Column(Integer, nullable=False, default=1)

    preparar_fuego = Column(Boolean, nullable=False, default=False)
    reserva_horno = Column(Boolean, nullable=False, default=False)
    reserva_brasa = Column(Boolean, nullable=False, default=False)
    no_cleaning_service = Column(Boolean, nullable=False, default=False)

    status = Column(
        Enum(BookingStatus, native_enum=False, length=20),
        nullable=False,
        default=BookingStatus.pending,
        index=True,
    )
    final_attendees = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)

    user_id = Column(_pk, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    table_slots = relationship(
        "BookingTable",
        back_populates="booking",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="BookingTable.table_number",
    )

    @validates("apartment_number")
    def _validate_apartment(self, key, value):
        if value is None or not 1 <= value <= 48:
            raise ValueError("El número de apartamento debe estar entre 1 y 48")
        return value

    @validates("number_of_people")
    def _validate_people(self, key, value):
        if value is None or value < 1:
            raise ValueError("El número de personas debe ser al menos 1")
        return value

    @property
    def tables(self) -> list[int]:
        return [slot.table_number for slot in self.table_slots]

    def assign_tables(self, tables: list[int]) -> None:
        """Reemplaza las mesas de la reserva (valida rango y duplicados)."""
        if not tables:
            raise ValueError("Debe seleccionar al menos una mesa")
        if any(t < MIN_TABLE or t > MAX_TABLE for t in tables) or len(set(tables)) != len(tables):
            raise ValueError("Las mesas deben estar entre 1 y 6 y no repetirse")

        wanted = set(tables)
        # Se conservan las filas existentes para no borrar e insertar la misma mesa
        for slot in list(self.table_slots):
            if slot.table_number not in wanted:
                self.table_slots.remove(slot)
        current = {slot.table_number for slot in self.table_slots}
        for t in sorted(wanted - current):
            self.table_slots.append(BookingTable(table_number=t))
        self.sync_table_slots()

    def sync_table_slots(self) -> None:
        """Propaga fecha, turno y estado a las filas de mesas."""
        hold = None if self.status == BookingStatus.cancelled else True
        for slot in self.table_slots:
            slot.date = self.date
            slot.meal_type = self.meal_type
            slot.hold = hold


class BookingTable(Base):
    __tablename__ = "booking_tables"
    __table_args__ = (
        UniqueConstraint("date", "meal_type", "table_number", "hold", name="uq_booking_tables_slot"),
        UniqueConstraint("booking_id", "table_number", name="uq_booking_tables_booking"),
    )

    id = Column(_pk, primary_key=True, autoincrement=True)
    booking_id = Column(_pk, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    meal_type = Column(Enum(MealType, native_enum=False, length=10), nullable=False)
    table_number = Column(Integer, nullable=False)
    hold = Column(Boolean, nullable=True, default=True)

    booking = relationship("Booking", back_populates="table_slots")
