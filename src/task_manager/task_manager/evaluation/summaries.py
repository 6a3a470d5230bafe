from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence

from ..core.enums import TaskStatus
from ..tasks.model import Task
from ..users.model import User
from .engine import round_half_up
from .status import canonical_status


def status_breakdown(tasks: Iterable[Task]) -> Dict[str, int]:
    counts = {status.value: 0 for status in TaskStatus}
    for task in tasks:
        counts[canonical_status(task.status).value] += 1
    return counts


@dataclass(frozen=True)
class MemberSummary:
    """Closing view per assignee: only tasks already closed (completed or delayed) count."""

    key: str
    name: str
    completed: int
    delayed: int
    total: int
    completion_percentage: int
    marked_count: int
    marks_scaled: int

    def to_dict(self) -> dict:
        return {
            "idOrEmail": self.key,
            "name": self.name,
            "tasksCompleted": self.completed,
            "tasksDelayed": self.delayed,
            "totalTasks": self.total,
            "totalOutOf100": self.completion_percentage,
            "markedCount": self.marked_count,
            "marksScaled": self.marks_scaled,
        }


def member_summaries(tasks: Iterable[Task], users: Sequence[User]) -> List[MemberSummary]:
    grouped: Dict[str, dict] = {}
    for task in tasks:
        status = canonical_status(task.status)
        if status not in (TaskStatus.COMPLETED, TaskStatus.DELAYED):
            continue
        key = task.assigned_to or task.assigned_email or "unassigned"
        g = grouped.setdefault(key, {"completed": 0, "delayed": 0, "marks": []})
        if status == TaskStatus.COMPLETED:
            g["completed"] += 1
        else:
            g["delayed"] += 1
        if task.closing_mark is not None:
            g["marks"].append(float(task.closing_mark))

    out: List[MemberSummary] = []
    for key, g in grouped.items():
        total = g["completed"] + g["delayed"]
        marks = g["marks"]
        label = next((u for u in users if key in (u.uid, u.email)), None)
        out.append(
            MemberSummary(
                key=key,
                name=(label.name or label.email) if label else key,
                completed=g["completed"],
                delayed=g["delayed"],
                total=total,
                completion_percentage=round_half_up(g["completed"] / total * 100) if total else 0,
                marked_count=len(marks),
                marks_scaled=round_half_up(sum(marks) / (len(marks) * 100) * 100) if marks else 0,
            )
        )
    out.sort(key=lambda m: m.name.lower())
    return out
