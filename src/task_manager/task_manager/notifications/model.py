from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Notification:
    notification_id: str
    title: str
    message: str
    task_id: Optional[str] = None
    recipient_uid: Optional[str] = None
    recipient_email: Optional[str] = None
    sent_by: Optional[str] = None
    read: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "taskId": self.task_id,
            "recipientUid": self.recipient_uid,
            "recipientEmail": self.recipient_email,
            "title": self.title,
            "message": self.message,
            "sentBy": self.sent_by,
            "read": self.read,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
