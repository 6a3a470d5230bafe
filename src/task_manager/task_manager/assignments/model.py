from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Assignment:
    assignment_id: str
    employee_id: str
    task_id: str
    progress: int = 0
    note: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.assignment_id,
            "employeeId": self.employee_id,
            "taskId": self.task_id,
            "progress": self.progress,
            "note": self.note,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
