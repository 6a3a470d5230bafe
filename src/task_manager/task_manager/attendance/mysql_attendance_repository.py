from __future__ import annotations

from datetime import date, datetime
from typing import Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_datetime
from .model import AttendanceEntry
from .repository import AttendanceRepository

_COLUMNS = "entry_id, user_id, user_email, user_name, work_date, status, marked_at"


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _row_to_entry(row: dict) -> AttendanceEntry:
    return AttendanceEntry(
        entry_id=row["entry_id"],
        user_id=row["user_id"],
        user_email=row.get("user_email"),
        user_name=row.get("user_name"),
        work_date=_as_date(row["work_date"]),
        status=AttendanceStatus(row["status"]),
        marked_at=normalize_mysql_datetime(row.get("marked_at")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert_many(self, entries: Sequence[AttendanceEntry]) -> list[str]:
        if not entries:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance (entry_id, user_id, user_email, user_name, work_date, status, marked_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE
                    user_email=VALUES(user_email),
                    user_name=VALUES(user_name),
                    status=VALUES(status),
                    marked_at=VALUES(marked_at)
                """,
                [
                    (e.entry_id, e.user_id, e.user_email, e.user_name, e.work_date, e.status.value, e.marked_at)
                    for e in entries
                ],
            )
        return [e.entry_id for e in entries]

    def list_all(self) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance ORDER BY work_date DESC, user_name")
            return [_row_to_entry(r) for r in fetchall(cur)]

    def list_for_user(self, user_id: str) -> Sequence[AttendanceEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE user_id=%s ORDER BY work_date DESC", (user_id,))
            return [_row_to_entry(r) for r in fetchall(cur)]
