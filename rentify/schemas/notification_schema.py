from datetime import datetime
from typing import Optional

from rentify.enums.notification_type import NotificationType
from .base_schema import CamelModel
from .user_schema import UserMinimumResponse


class NotificationResponse(CamelModel):
    id: int
    recipient_id: int
    sender: Optional[UserMinimumResponse] = None
    message: str
    type: NotificationType
    is_read: bool
    created_at: Optional[datetime] = None
