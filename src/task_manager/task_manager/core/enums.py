from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class TaskStatus(str, Enum):
    """Canonical task states. Raw stored statuses map onto exactly one of these."""

    COMPLETED = "completed"
    IN_PROCESS = "in process"
    DELAYED = "delayed"
    CANCELLED = "cancelled"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReminderView(str, Enum):
    DUE = "due"
    DELAYED = "delayed"
    OVERDUE = "overdue"
    ALL = "all"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    OUTDOOR = "outdoor"
    HALF_DAY = "halfDay"
    SHORT_LEAVE = "shortLeave"
    ABSENT = "absent"
    OFF = "off"
