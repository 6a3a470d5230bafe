from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from ..common.datetime_utils import months_before, to_midnight
from ..core.constants import REMINDER_WINDOW_DAYS
from ..core.enums import ReminderView, TaskStatus
from ..tasks.model import Task
from ..users.model import User
from .status import canonical_status

_SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class Reminder:
    task_id: str
    title: str
    assigned_name: str
    assigned_email: str
    assigned_uid: Optional[str]
    status: str
    canonical: TaskStatus
    end_date: Optional[datetime]
    days_left: Optional[int]

    def to_dict(self) -> dict:
        return {
            "taskId": self.task_id,
            "taskTitle": self.title,
            "assignedName": self.assigned_name,
            "assignedEmail": self.assigned_email,
            "assignedUid": self.assigned_uid,
            "status": self.status,
            "canonicalStatus": self.canonical.value,
            "endDate": self.end_date.isoformat() if self.end_date else None,
            "daysLeft": self.days_left,
        }


def days_left(end_date: datetime, today: datetime) -> int:
    """Whole days between the two calendar dates (midnight to midnight), rounded up."""
    diff = to_midnight(end_date) - to_midnight(today)
    return math.ceil(diff.total_seconds() / _SECONDS_PER_DAY)


def _find_user(task: Task, users: Sequence[User]) -> Optional[User]:
    for u in users:
        if task.assigned_to and u.uid == task.assigned_to:
            return u
        if task.assigned_email and u.email and u.email.lower() == task.assigned_email.lower():
            return u
    return None


def _to_reminder(task: Task, users: Sequence[User], now: datetime) -> Reminder:
    user = _find_user(task, users)
    assigned_name = task.assigned_name or (user.name if user else "") or task.assigned_email or "Unknown"
    return Reminder(
        task_id=task.task_id,
        title=task.title,
        assigned_name=assigned_name,
        assigned_email=task.assigned_email or (user.email if user else ""),
        assigned_uid=task.assigned_to or (user.uid if user else None),
        status=task.status,
        canonical=canonical_status(task.status),
        end_date=task.end_date,
        days_left=days_left(task.end_date, now) if task.end_date else None,
    )


def _end_date_desc(items: List[Reminder]) -> List[Reminder]:
    dated = sorted((r for r in items if r.end_date), key=lambda r: r.end_date, reverse=True)
    return dated + [r for r in items if not r.end_date]


def due_soon(reminders: Iterable[Reminder]) -> List[Reminder]:
    hits = [
        r
        for r in reminders
        if r.days_left is not None
        and 0 <= r.days_left <= REMINDER_WINDOW_DAYS
        and r.canonical in (TaskStatus.IN_PROCESS, TaskStatus.DELAYED)
    ]
    return sorted(hits, key=lambda r: r.days_left)


def delayed(reminders: Iterable[Reminder], now: datetime, *, since_months: int = 0) -> List[Reminder]:
    months = int(since_months or 0)
    cutoff = months_before(now, months) if months > 0 else None
    hits = []
    for r in reminders:
        if r.canonical != TaskStatus.DELAYED:
            continue
        if cutoff is not None and (r.end_date is None or r.end_date > cutoff):
            continue
        hits.append(r)
    return _end_date_desc(hits)


def overdue(reminders: Iterable[Reminder], now: datetime) -> List[Reminder]:
    hits = [r for r in reminders if r.end_date and r.end_date < now and r.canonical != TaskStatus.COMPLETED]
    return _end_date_desc(hits)


def build_reminders(
    tasks: Iterable[Task],
    users: Sequence[User],
    now: datetime,
    *,
    view: ReminderView = ReminderView.DUE,
    delayed_since_months: int = 0,
) -> List[Reminder]:
    items = [_to_reminder(t, users, now) for t in tasks]
    if view == ReminderView.DUE:
        return due_soon(items)
    if view == ReminderView.DELAYED:
        return delayed(items, now, since_months=delayed_since_months)
    if view == ReminderView.OVERDUE:
        return overdue(items, now)
    return _end_date_desc(items)
