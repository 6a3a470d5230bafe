from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Priority
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_datetime, placeholders
from .model import NewTask, Task
from .repository import TaskRepository

_COLUMNS = (
    "task_id, title, description, status, priority, assigned_to, assigned_email, assigned_name, "
    "start_date, end_date, closing_mark, closing_marked_at, actual_status, created_by, created_at, updated_at"
)
_UPDATABLE = {
    "title",
    "description",
    "status",
    "priority",
    "assigned_to",
    "assigned_email",
    "assigned_name",
    "start_date",
    "end_date",
    "closing_mark",
    "closing_marked_at",
    "actual_status",
}


def _row_to_task(row: dict) -> Task:
    try:
        priority = Priority(row.get("priority") or Priority.MEDIUM.value)
    except ValueError:
        priority = Priority.MEDIUM
    mark = row.get("closing_mark")
    return Task(
        task_id=row["task_id"],
        title=row["title"],
        description=row.get("description") or "",
        status=row.get("status") or "",
        priority=priority,
        assigned_to=row.get("assigned_to"),
        assigned_email=row.get("assigned_email"),
        assigned_name=row.get("assigned_name"),
        start_date=normalize_mysql_datetime(row.get("start_date")),
        end_date=normalize_mysql_datetime(row.get("end_date")),
        closing_mark=float(mark) if mark is not None else None,
        closing_marked_at=normalize_mysql_datetime(row.get("closing_marked_at")),
        actual_status=row.get("actual_status") or "",
        created_by=row.get("created_by"),
        created_at=normalize_mysql_datetime(row.get("created_at")),
        updated_at=normalize_mysql_datetime(row.get("updated_at")),
    )


def _insert_params(task_id: str, t: NewTask) -> tuple:
    return (
        task_id,
        t.title,
        t.description,
        t.status,
        t.priority.value,
        t.assigned_to,
        t.assigned_email,
        t.assigned_name,
        t.start_date,
        t.end_date,
        t.actual_status,
        t.created_by,
    )


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, task_id: str) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE task_id=%s", (task_id,))
            row = fetchone(cur)
            return _row_to_task(row) if row else None

    def list_all(self) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at DESC")
            return [_row_to_task(r) for r in fetchall(cur)]

    def list_by_assignee(self, *, uid: Optional[str], email: Optional[str]) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM tasks
                WHERE (%s IS NOT NULL AND assigned_to=%s)
                   OR (%s IS NOT NULL AND LOWER(assigned_email)=LOWER(%s))
                ORDER BY created_at DESC
                """,
                (uid, uid, email, email),
            )
            return [_row_to_task(r) for r in fetchall(cur)]

    def create(self, task_id: str, task: NewTask) -> str:
        return self.bulk_create([(task_id, task)])[0]

    def bulk_create(self, items: Sequence[tuple[str, NewTask]]) -> list[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO tasks (task_id, title, description, status, priority, assigned_to, assigned_email,
                                   assigned_name, start_date, end_date, actual_status, created_by)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                """,
                [_insert_params(task_id, t) for task_id, t in items],
            )
        return [task_id for task_id, _ in items]

    def update(self, task_id: str, fields: dict) -> bool:
        values = {k: v for k, v in fields.items() if k in _UPDATABLE}
        if not values:
            return False
        if isinstance(values.get("priority"), Priority):
            values["priority"] = values["priority"].value
        assignments = ", ".join(f"{col}=%s" for col in values)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE tasks SET {assignments} WHERE task_id=%s", (*values.values(), task_id))
            return cur.rowcount > 0

    def delete(self, task_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE task_id=%s", (task_id,))
            return cur.rowcount > 0

    def delete_for_assignee(self, *, uid: Optional[str], email: Optional[str]) -> list[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT task_id FROM tasks
                WHERE (%s IS NOT NULL AND assigned_to=%s)
                   OR (%s IS NOT NULL AND LOWER(assigned_email)=LOWER(%s))
                """,
                (uid, uid, email, email),
            )
            ids = [r["task_id"] for r in fetchall(cur)]
            if ids:
                cur.execute(f"DELETE FROM tasks WHERE task_id IN ({placeholders(ids)})", tuple(ids))
            return ids
