from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from app.models.feedback import FeedbackStatus, FeedbackType
from app.schemas.common import CamelModel


class FeedbackCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=150)
    email: EmailStr
    type: FeedbackType
    content: str = Field(..., min_length=1)


class FeedbackStatusUpdate(CamelModel):
    status: FeedbackStatus


class FeedbackRead(CamelModel):
    id: int
    name: str
    apartment_number: Optional[int] = None
    email: str
    type: FeedbackType
    content: str
    status: FeedbackStatus
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FeedbackCreated(CamelModel):
    success: bool = True
    message: str
    email_sent: bool


class FeedbackPage(CamelModel):
    feedback: List[FeedbackRead]
    page: int
    limit: int
    total_pages: int
    total_count: int
