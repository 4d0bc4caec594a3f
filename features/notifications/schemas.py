from datetime import datetime
from typing import List, Optional
from ninja import Schema

class NotificationSchema(Schema):
    id: int
    title: str
    message: str
    is_read: bool
    notification_type: str
    target_type: Optional[str] = None
    target_id: Optional[str] = None
    created_at: datetime


class UnreadCountSchema(Schema):
    unread: int


class NotificationListResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[List[NotificationSchema]] = None
    count: Optional[int] = None


class NotificationResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[NotificationSchema] = None


class UnreadCountResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[UnreadCountSchema] = None
