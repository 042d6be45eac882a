from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List


class NotificationResponse(BaseModel):
    id: str
    title: str
    message: str
    type: str
    link: Optional[str] = None
    is_read: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int


class UnreadCountResponse(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    updated: int


class RecipientOutcomeResponse(BaseModel):
    user_id: str
    in_app: bool
    email: str
    error: Optional[str] = None


class DispatchResultResponse(BaseModel):
    event: str
    attempted: int
    in_app_written: int
    in_app_failed: int
    emails_sent: int
    emails_demo: int
    emails_failed: int
    emails_skipped: int
    demo: bool
    fully_delivered: bool
    recipients: List[RecipientOutcomeResponse]
    error: Optional[str] = None
