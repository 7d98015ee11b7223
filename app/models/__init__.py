from app.db.base import Base

# Importa modelos para que se registren en Base.metadata
from .user import User
from .booking import Booking, BookingTable, BookingStatus, MealType
from .blocked_date import BlockedDate, BlockedMealType, JuntaReason
from .feedback import Feedback, FeedbackType, FeedbackStatus
from .login_event import LoginEvent
from .notification_log import NotificationLog
from .password_reset import PasswordReset, ResetStatus
from .push_subscription import PushSubscription
from .activity_log import ActivityLog, ActivityAction

__all__ = [
    "User",
    "Booking",
    "BookingTable",
    "BookingStatus",
    "MealType",
    "BlockedDate",
    "BlockedMealType",
    "JuntaReason",
    "Feedback",
    "FeedbackType",
    "FeedbackStatus",
    "LoginEvent",
    "NotificationLog",
    "PasswordReset",
    "ResetStatus",
    "PushSubscription",
    "ActivityLog",
    "ActivityAction",
    "Base",
]
