# app/models/feedback.py
import enum

from sqlalchemy import Column, BigInteger, Integer, String, Text, DateTime, Enum, ForeignKey
from sqlalchemy.sql import func

from app.db.append_only import append_only
from app.db.base import Base

_pk = BigInteger().with_variant(Integer, "sqlite")


class FeedbackType(str, enum.Enum):
    bug = "bug"
    feature = "feature"
    question = "question"
    other = "other"


class FeedbackStatus(str, enum.Enum):
    new = "new"
    in_progress = "in-progress"
    resolved = "resolved"


_values = lambda e: [m.value for m in e]  # noqa: E731


@append_only("status")
class Feedback(Base):
    """Comentarios de los usuarios. Sólo el estado puede avanzar."""
    __tablename__ = "feedback"

    id = Column(_pk, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    apartment_number = Column(Integer, nullable=True)
    email = Column(String(255), nullable=False)
    type = Column(Enum(FeedbackType, native_enum=False, values_callable=_values, length=20), nullable=False)
    content = Column(Text, nullable=False)
    status = Column(
        Enum(FeedbackStatus, native_enum=False, values_callable=_values, length=20),
        nullable=False,
        default=FeedbackStatus.new,
        index=True,
    )
    user_id = Column(_pk, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
