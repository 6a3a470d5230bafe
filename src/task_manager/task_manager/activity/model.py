from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ActivityLog:
    log_id: str
    action: str
    user_id: Optional[str] = None
    task_id: Optional[str] = None
    details: str = ""
    logged_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.log_id,
            "action": self.action,
            "userId": self.user_id,
            "taskId": self.task_id,
            "details": self.details,
            "timestamp": self.logged_at.isoformat() if self.logged_at else None,
        }
