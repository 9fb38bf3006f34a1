from datetime import datetime

from pydantic import BaseModel

from enums.notification_kind import NotificationKind


class NotificationDTO(BaseModel):
    message: str
    kind: NotificationKind = NotificationKind.INFO
    created_at: datetime
    expires_at: datetime
