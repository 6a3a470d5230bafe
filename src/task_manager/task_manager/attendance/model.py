from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


def entry_id_for(user_id: str, work_date: date) -> str:
    return f"{user_id}_{work_date.isoformat()}"


@dataclass(frozen=True)
class AttendanceEntry:
    """One user's status on one calendar day; the id makes re-marking an overwrite."""

    entry_id: str
    user_id: str
    work_date: date
    status: AttendanceStatus
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    marked_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "userId": self.user_id,
            "userEmail": self.user_email,
            "userName": self.user_name,
            "date": self.work_date.isoformat(),
            "status": self.status.value,
            "markedAt": self.marked_at.isoformat() if self.marked_at else None,
        }
