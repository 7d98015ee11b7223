from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class PushPayload(CamelModel):
    """Carga útil de una notificación push (la interpreta sw.js)."""
    title: str
    body: str
    icon: Optional[str] = None
    badge: Optional[str] = None
    tag: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class PushKeys(CamelModel):
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)


class PushSubscribeRequest(CamelModel):
    endpoint: str = Field(..., min_length=1)
    keys: PushKeys


class PushUnsubscribeRequest(CamelModel):
    endpoint: str = Field(..., min_length=1)


class NotificationRead(CamelModel):
    id: int
    title: str
    body: str
    tag: Optional[str] = None
    sent_at: Optional[datetime] = None


class NotificationPage(CamelModel):
    notifications: List[NotificationRead]
    page: int
    limit: int
    total_pages: int
    total_count: int
