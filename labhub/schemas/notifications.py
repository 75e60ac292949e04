from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    link: Optional[str] = None
    read: bool
    createdAtIso: str


class NotificationListResponse(BaseModel):
    unreadCount: int
    notifications: List[NotificationResponse]
