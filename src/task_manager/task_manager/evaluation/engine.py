"""Per-employee completion rate and letter grade.

Pure functions over already-fetched task and user snapshots.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from ..core.constants import GRADE_F_REMARK
from ..core.enums import Role, TaskStatus
from ..tasks.model import Task
from ..users.model import User
from .status import canonical_status


@dataclass(frozen=True)
class Evaluation:
    user_id: str
    name: str
    email: str
    total: int
    completed: int
    delayed: int
    rate: int
    grade: str
    remarks: str

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "total": self.total,
            "completed": self.completed,
            "delayed": self.delayed,
            "rate": self.rate,
            "grade": self.grade,
            "remarks": self.remarks,
        }


def evaluation_status(task: Task, now: datetime) -> Optional[TaskStatus]:
    """Status a task counts as for evaluation; None when it is left out (cancelled).

    In-process work with no end date, or an end date not yet passed, counts as
    completed; once the end date is in the past it counts as delayed.
    """
    status = canonical_status(task.status)
    if status == TaskStatus.CANCELLED:
        return None
    if status == TaskStatus.IN_PROCESS:
        if task.end_date is None or task.end_date >= now:
            return TaskStatus.COMPLETED
        return TaskStatus.DELAYED
    return status


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def completion_rate(tasks: Iterable[Task], now: datetime) -> tuple[int, int, int, int]:
    """Return ``(rate, total, completed, delayed)`` over the relevant tasks."""
    completed = delayed = 0
    for task in tasks:
        status = evaluation_status(task, now)
        if status == TaskStatus.COMPLETED:
            completed += 1
        elif status == TaskStatus.DELAYED:
            delayed += 1
    total = completed + delayed
    rate = round_half_up(completed / total * 100) if total else 0
    return rate, total, completed, delayed


def grade_from_rate(rate: float) -> str:
    if rate > 90:
        return "A"
    if 85 <= rate <= 90:
        return "B"
    if 80 <= rate <= 84:
        return "C"
    if 70 <= rate <= 79:
        return "D"
    return "F"


def remark_for_grade(grade: str) -> str:
    return GRADE_F_REMARK if grade == "F" else ""


def is_assigned_to(task: Task, user: User) -> bool:
    if task.assigned_to and task.assigned_to == user.uid:
        return True
    email = (user.email or "").lower()
    return bool(email) and (task.assigned_email or "").lower() == email


def evaluate_employee(user: User, tasks: Sequence[Task], now: datetime) -> Evaluation:
    mine = [t for t in tasks if is_assigned_to(t, user)]
    rate, total, completed, delayed = completion_rate(mine, now)
    grade = grade_from_rate(rate)
    return Evaluation(
        user_id=user.uid,
        name=user.name or "-",
        email=user.email,
        total=total,
        completed=completed,
        delayed=delayed,
        rate=rate,
        grade=grade,
        remarks=remark_for_grade(grade),
    )


def evaluate_all(users: Iterable[User], tasks: Sequence[Task], now: datetime) -> List[Evaluation]:
    rows = [evaluate_employee(u, tasks, now) for u in users if u.role == Role.EMPLOYEE]
    rows.sort(key=lambda e: e.name.lower())
    return rows
