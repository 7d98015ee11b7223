from datetime import datetime
from typing import List, Optional

from app.models.activity_log import ActivityAction
from app.schemas.common import CamelModel


class ActivityLogRead(CamelModel):
    id: int
    action: ActivityAction
    apartment_number: Optional[int] = None
    user_id: Optional[int] = None
    target_user_id: Optional[int] = None
    details: str
    timestamp: Optional[datetime] = None


class ActivityPage(CamelModel):
    logs: List[ActivityLogRead]
    page: int
    limit: int
    total_pages: int
    total_count: int
