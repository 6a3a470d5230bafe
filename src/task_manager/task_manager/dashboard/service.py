"""JSON-ready dashboard state for the admin and employee screens."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..core.constants import RECENT_TASKS_LIMIT
from ..core.enums import ReminderView, Role, TaskStatus
from ..evaluation.engine import evaluate_all, evaluate_employee
from ..evaluation.reminders import Reminder, build_reminders, due_soon
from ..evaluation.summaries import member_summaries, status_breakdown
from ..events.bus import TASKS_TOPIC, EventBus
from ..events.feed import LiveCollection
from ..identity.service import SessionUser
from ..kpi.service import KpiService, average_score
from ..notifications.service import NotificationService
from ..tasks.model import Task
from ..tasks.service import TaskService
from ..users.model import User
from ..users.service import UserService

logger = logging.getLogger(__name__)


def parse_view(value) -> ReminderView:
    try:
        return ReminderView(str(value or ReminderView.DUE.value).strip().lower())
    except ValueError:
        return ReminderView.DUE


def parse_months(value) -> int:
    try:
        return max(0, int(value or 0))
    except (TypeError, ValueError):
        return 0


def _newest_first(tasks: List[Task]) -> List[Task]:
    return sorted(tasks, key=lambda t: t.created_at or datetime.min, reverse=True)


class AdminDashboardService:
    """Keeps a live task snapshot fed by the event bus and derives the admin views from it."""

    def __init__(self, tasks: TaskService, users: UserService, kpi: KpiService, *, bus: EventBus):
        self._tasks = tasks
        self._users = users
        self._kpi = kpi
        self._feed = LiveCollection(lambda t: t.task_id)
        self._unfollow: Optional[Callable[[], None]] = self._feed.follow(bus, TASKS_TOPIC)

    def close(self) -> None:
        if self._unfollow:
            self._unfollow()
            self._unfollow = None

    def snapshot(self, now: datetime) -> List[Task]:
        """Reload from storage, then convert overdue in-process work to delayed."""
        self._feed.replace(self._tasks.list_tasks())
        self._tasks.mark_overdue_as_delayed(now)
        return _newest_first(self._feed.snapshot())

    def reminders(self, now: datetime, *, view: ReminderView = ReminderView.DUE, delayed_since_months: int = 0) -> List[Reminder]:
        return build_reminders(
            self.snapshot(now),
            self._users.list_users(),
            now,
            view=view,
            delayed_since_months=delayed_since_months,
        )

    def build(self, now: datetime, *, view: ReminderView = ReminderView.DUE, delayed_since_months: int = 0) -> dict:
        tasks = self.snapshot(now)
        users = list(self._users.list_users())
        breakdown = status_breakdown(tasks)
        employees = [u for u in users if u.role == Role.EMPLOYEE]
        reminders = build_reminders(tasks, users, now, view=view, delayed_since_months=delayed_since_months)

        return {
            "totals": {
                "tasks": len(tasks),
                "employees": len(employees),
                "completed": breakdown[TaskStatus.COMPLETED.value],
                "inProcess": breakdown[TaskStatus.IN_PROCESS.value],
                "delayed": breakdown[TaskStatus.DELAYED.value],
                "cancelled": breakdown[TaskStatus.CANCELLED.value],
            },
            "statusBreakdown": breakdown,
            "evaluations": [e.to_dict() for e in evaluate_all(users, tasks, now)],
            "reminders": {
                "view": view.value,
                "months": delayed_since_months,
                "items": [r.to_dict() for r in reminders],
            },
            "memberSummaries": [m.to_dict() for m in member_summaries(tasks, users)],
            "kpiAverages": self._kpi.averages_by_user(),
            "recentTasks": [t.to_dict() for t in tasks[:RECENT_TASKS_LIMIT]],
        }


class EmployeeDashboardService:
    def __init__(self, tasks: TaskService, kpi: KpiService, notifications: NotificationService):
        self._tasks = tasks
        self._kpi = kpi
        self._notifications = notifications

    def build(self, user: SessionUser, now: datetime) -> dict:
        mine = _newest_first(list(self._tasks.list_by_assignee(uid=user.uid, email=user.email)))
        profile = User(uid=user.uid, email=user.email, name=user.name, role=user.role)
        evaluation = evaluate_employee(profile, mine, now)
        scores = self._kpi.scores_for_owner(uid=user.uid, email=user.email)
        notifications = self._notifications.list_for_recipient(uid=user.uid, email=user.email)
        reminders = NotificationService.reminders_only(notifications, {t.task_id for t in mine})

        return {
            "user": {"uid": user.uid, "email": user.email, "name": user.name, "role": user.role.value},
            "tasks": [t.to_dict() for t in mine],
            "recentTasks": [t.to_dict() for t in mine[:RECENT_TASKS_LIMIT]],
            "statusBreakdown": status_breakdown(mine),
            "evaluation": evaluation.to_dict(),
            "dueSoon": [r.to_dict() for r in due_soon(build_reminders(mine, [profile], now, view=ReminderView.ALL))],
            "kpi": {"entries": [s.to_dict() for s in scores], "average": average_score(scores)},
            "notifications": [n.to_dict() for n in notifications],
            "portalReminders": [n.to_dict() for n in reminders],
        }
