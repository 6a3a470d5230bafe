from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..core.enums import Priority


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class Task:
    """Domain entity: task document.

    ``status`` keeps the raw stored text; read it through ``canonical_status``.
    """

    task_id: str
    title: str
    description: str = ""
    status: str = "pending"
    priority: Priority = Priority.MEDIUM
    assigned_to: Optional[str] = None
    assigned_email: Optional[str] = None
    assigned_name: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    closing_mark: Optional[float] = None
    closing_marked_at: Optional[datetime] = None
    actual_status: str = ""
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def with_changes(self, **changes) -> "Task":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "id": self.task_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority.value,
            "assignedTo": self.assigned_to,
            "assignedEmail": self.assigned_email,
            "assignedName": self.assigned_name,
            "startDate": _iso(self.start_date),
            "endDate": _iso(self.end_date),
            "closingMark": self.closing_mark,
            "closingMarkedAt": _iso(self.closing_marked_at),
            "actualStatus": self.actual_status,
            "createdBy": self.created_by,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class NewTask:
    title: str
    description: str = ""
    status: str = "pending"
    priority: Priority = Priority.MEDIUM
    assigned_to: Optional[str] = None
    assigned_email: Optional[str] = None
    assigned_name: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    actual_status: str = ""
    created_by: Optional[str] = None
