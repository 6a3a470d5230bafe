from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_datetime
from .model import Assignment
from .repository import AssignmentRepository

_COLUMNS = "assignment_id, employee_id, task_id, progress, note, created_at, updated_at"


def _row_to_assignment(row: dict) -> Assignment:
    return Assignment(
        assignment_id=row["assignment_id"],
        employee_id=row["employee_id"],
        task_id=row["task_id"],
        progress=int(row.get("progress") or 0),
        note=row.get("note") or "",
        created_at=normalize_mysql_datetime(row.get("created_at")),
        updated_at=normalize_mysql_datetime(row.get("updated_at")),
    )


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, assignment_id: str, employee_id: str, task_id: str, progress: int, note: str) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO assignments (assignment_id, employee_id, task_id, progress, note)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (assignment_id, employee_id, task_id, progress, note),
            )
        return assignment_id

    def get_by_id(self, assignment_id: str) -> Optional[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM assignments WHERE assignment_id=%s", (assignment_id,))
            row = fetchone(cur)
            return _row_to_assignment(row) if row else None

    def list_for_employee(self, employee_id: str) -> Sequence[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM assignments WHERE employee_id=%s ORDER BY created_at DESC",
                (employee_id,),
            )
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def update_progress(self, assignment_id: str, *, progress: int, note: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if note is None:
                cur.execute("UPDATE assignments SET progress=%s WHERE assignment_id=%s", (progress, assignment_id))
            else:
                cur.execute(
                    "UPDATE assignments SET progress=%s, note=%s WHERE assignment_id=%s",
                    (progress, note, assignment_id),
                )
            return cur.rowcount > 0
