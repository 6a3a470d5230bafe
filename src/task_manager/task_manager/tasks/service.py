from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local, parse_date_input
from ..common.validators import require_non_empty, require_range
from ..core.constants import DEFAULT_TASK_STATUS, MAX_CLOSING_MARK
from ..core.enums import TaskStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..evaluation.status import canonical_status, normalize_priority
from ..events.bus import TASKS_TOPIC, ChangeEvent, EventBus
from ..users.repository import UserRepository
from .model import NewTask, Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)

# request body key -> column
_EDITABLE_FIELDS = {
    "title": "title",
    "description": "description",
    "status": "status",
    "priority": "priority",
    "assignedTo": "assigned_to",
    "assignedEmail": "assigned_email",
    "assignedName": "assigned_name",
    "startDate": "start_date",
    "endDate": "end_date",
    "actualStatus": "actual_status",
}
_DATE_FIELDS = {"start_date", "end_date"}


def normalize_status_label(value: Any) -> str:
    """Stored label for a free-text status coming from forms or uploads."""
    text = str(value or "").strip().lower()
    if not text:
        return DEFAULT_TASK_STATUS
    if "progress" in text or "process" in text:
        return "in-progress"
    if "complete" in text or "done" in text:
        return TaskStatus.COMPLETED.value
    if "delay" in text or "late" in text:
        return TaskStatus.DELAYED.value
    if "cancel" in text:
        return TaskStatus.CANCELLED.value
    return DEFAULT_TASK_STATUS


def _parse_date(value: Any, field_name: str) -> Optional[datetime]:
    try:
        return parse_date_input(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not a valid date")


@dataclass(frozen=True)
class BulkRowResult:
    index: int
    ok: bool
    task_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        if self.ok:
            return {"index": self.index, "ok": True, "id": self.task_id}
        return {"index": self.index, "ok": False, "error": self.error}


@dataclass(frozen=True)
class BulkResult:
    results: List[BulkRowResult] = field(default_factory=list)

    @property
    def count(self) -> int:
        return sum(1 for r in self.results if r.ok)

    def to_dict(self) -> dict:
        return {"results": [r.to_dict() for r in self.results], "count": self.count}


class TaskService:
    def __init__(self, tasks: TaskRepository, users: UserRepository, *, bus: Optional[EventBus] = None):
        self._tasks = tasks
        self._users = users
        self._bus = bus

    def _publish(self, event: ChangeEvent) -> None:
        if self._bus:
            self._bus.publish(TASKS_TOPIC, event)

    def _resolve_assignee(
        self,
        assigned_to: Optional[str],
        assigned_email: Optional[str],
        assigned_name: Optional[str],
    ) -> tuple[Optional[str], Optional[str], Optional[str]]:
        """Fill in whichever of uid / email / name is missing from the profile."""
        assigned_to = (assigned_to or "").strip() or None
        assigned_email = (assigned_email or "").strip() or None
        assigned_name = (assigned_name or "").strip() or None

        profile = None
        if assigned_to:
            profile = self._users.get_by_id(assigned_to)
        elif assigned_email:
            profile = self._users.get_by_email(assigned_email)
        if profile:
            assigned_to = assigned_to or profile.uid
            assigned_email = assigned_email or profile.email
            assigned_name = assigned_name or profile.display_name
        return assigned_to, assigned_email, assigned_name

    def _build_new_task(self, payload: dict, *, created_by: Optional[str]) -> NewTask:
        title = require_non_empty(payload.get("title"), "Title")
        start_date = _parse_date(payload.get("startDate"), "Start date")
        end_date = _parse_date(payload.get("endDate"), "End date")
        if start_date and end_date and end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        assigned_to, assigned_email, assigned_name = self._resolve_assignee(
            payload.get("assignedTo"), payload.get("assignedEmail"), payload.get("assignedName")
        )
        return NewTask(
            title=title,
            description=str(payload.get("description") or ""),
            status=normalize_status_label(payload.get("status")),
            priority=normalize_priority(payload.get("priority")),
            assigned_to=assigned_to,
            assigned_email=assigned_email,
            assigned_name=assigned_name,
            start_date=start_date,
            end_date=end_date,
            actual_status=str(payload.get("actualStatus") or ""),
            created_by=payload.get("createdBy") or created_by,
        )

    def create_task(self, payload: dict, *, created_by: Optional[str] = None) -> str:
        new_task = self._build_new_task(payload, created_by=created_by)
        task_id = self._tasks.create(uuid.uuid4().hex, new_task)
        self._publish(
            ChangeEvent.upsert(
                task_id,
                self._tasks.get_by_id(task_id),
                actor_id=new_task.created_by,
                action="Task Created",
                message=f'Task "{new_task.title}" created',
            )
        )
        return task_id

    def get_task(self, task_id: str) -> Task:
        task = self._tasks.get_by_id(task_id)
        if not task:
            raise NotFoundError("Task not found")
        return task

    def require_assignee(self, task_id: str, *, uid: str, email: Optional[str]) -> Task:
        task = self.get_task(task_id)
        if task.assigned_to and task.assigned_to == uid:
            return task
        if email and (task.assigned_email or "").lower() == email.lower():
            return task
        raise AuthorizationError("Task is not assigned to you")

    def list_tasks(self) -> Sequence[Task]:
        return self._tasks.list_all()

    def list_by_assignee(self, *, uid: Optional[str], email: Optional[str]) -> Sequence[Task]:
        return self._tasks.list_by_assignee(uid=uid, email=(email or None))

    def list_by_status(self, status: Any) -> List[Task]:
        wanted = canonical_status(status)
        return [t for t in self._tasks.list_all() if canonical_status(t.status) == wanted]

    def _apply(self, task_id: str, fields: dict, *, actor_id: Optional[str], message: str) -> Task:
        if not self._tasks.get_by_id(task_id):
            raise NotFoundError("Task not found")
        if fields:
            self._tasks.update(task_id, fields)
        task = self.get_task(task_id)
        self._publish(ChangeEvent.upsert(task_id, task, actor_id=actor_id, action="Task Updated", message=message))
        return task

    def update_task(self, task_id: str, changes: dict, *, actor_id: Optional[str] = None) -> Task:
        fields: dict = {}
        for key, column in _EDITABLE_FIELDS.items():
            if key not in changes:
                continue
            value = changes[key]
            if column in _DATE_FIELDS:
                value = _parse_date(value, key)
            elif column == "priority":
                value = normalize_priority(value)
            elif column == "title":
                value = require_non_empty(value, "Title")
            fields[column] = value

        if "assigned_to" in fields or "assigned_email" in fields:
            fields["assigned_to"], fields["assigned_email"], fields["assigned_name"] = self._resolve_assignee(
                fields.get("assigned_to"), fields.get("assigned_email"), fields.get("assigned_name")
            )
        return self._apply(task_id, fields, actor_id=actor_id, message="Task updated")

    def update_status(self, task_id: str, status: str, *, actor_id: Optional[str] = None) -> Task:
        status = require_non_empty(status, "Status")
        return self._apply(task_id, {"status": status}, actor_id=actor_id, message=f"Status set to {status}")

    def set_closing_mark(
        self,
        task_id: str,
        mark: Any,
        *,
        actor_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Task:
        value = require_range(mark, "Closing mark", 0, MAX_CLOSING_MARK)
        return self._apply(
            task_id,
            {"closing_mark": value, "closing_marked_at": now or now_local()},
            actor_id=actor_id,
            message=f"Closing mark set to {value:g}",
        )

    def set_actual_status(self, task_id: str, text: str, *, actor_id: Optional[str] = None) -> Task:
        return self._apply(
            task_id,
            {"actual_status": (text or "").strip()},
            actor_id=actor_id,
            message="Actual status updated",
        )

    def delete_task(self, task_id: str, *, actor_id: Optional[str] = None) -> None:
        if not self._tasks.delete(task_id):
            raise NotFoundError("Task not found")
        self._publish(ChangeEvent.delete(task_id, actor_id=actor_id, action="Task Deleted", message="Task deleted"))

    def delete_for_assignee(self, *, uid: Optional[str], email: Optional[str], actor_id: Optional[str] = None) -> List[str]:
        deleted = self._tasks.delete_for_assignee(uid=uid, email=email)
        for task_id in deleted:
            self._publish(ChangeEvent.delete(task_id, actor_id=actor_id, action="Task Deleted", message="Task deleted"))
        return deleted

    def bulk_create(self, rows: Iterable[dict], *, created_by: Optional[str] = None) -> BulkResult:
        """Validate each row on its own; the valid ones are written in one batch.

        A bad row never aborts the others. If the batch write itself fails, every
        row that was going to be written reports that error.
        """
        results: dict[int, BulkRowResult] = {}
        pending: list[tuple[int, str, NewTask]] = []
        for index, row in enumerate(rows):
            if row is None:
                row = {}
            if not isinstance(row, Mapping):
                results[index] = BulkRowResult(index=index, ok=False, error="invalid row")
                continue
            if not str(row.get("title") or "").strip():
                results[index] = BulkRowResult(index=index, ok=False, error="missing title")
                continue
            try:
                new_task = self._build_new_task(row, created_by=created_by)
            except ValidationError as e:
                results[index] = BulkRowResult(index=index, ok=False, error=str(e))
                continue
            pending.append((index, uuid.uuid4().hex, new_task))

        if pending:
            try:
                self._tasks.bulk_create([(task_id, t) for _, task_id, t in pending])
            except Exception as e:
                logger.exception("Bulk task write failed (%d rows)", len(pending))
                for index, _, _ in pending:
                    results[index] = BulkRowResult(index=index, ok=False, error=str(e) or "write failed")
            else:
                for index, task_id, new_task in pending:
                    results[index] = BulkRowResult(index=index, ok=True, task_id=task_id)
                    self._publish(
                        ChangeEvent.upsert(
                            task_id,
                            self._tasks.get_by_id(task_id),
                            actor_id=new_task.created_by,
                            action="Task Created",
                            message=f'Task "{new_task.title}" created',
                        )
                    )

        return BulkResult(results=[results[i] for i in sorted(results)])

    def mark_overdue_as_delayed(self, now: datetime) -> List[str]:
        """Rewrite in-process tasks whose end date has passed to ``delayed``."""
        changed: list[str] = []
        for task in self._tasks.list_all():
            if canonical_status(task.status) != TaskStatus.IN_PROCESS:
                continue
            if task.end_date is None or task.end_date >= now:
                continue
            self._tasks.update(task.task_id, {"status": TaskStatus.DELAYED.value})
            changed.append(task.task_id)
            self._publish(
                ChangeEvent.upsert(
                    task.task_id,
                    task.with_changes(status=TaskStatus.DELAYED.value),
                    action="Task Updated",
                    message="Task automatically marked as delayed",
                )
            )
        if changed:
            logger.info("Marked %d overdue task(s) as delayed", len(changed))
        return changed
