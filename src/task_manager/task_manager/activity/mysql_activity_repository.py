from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_datetime
from .model import ActivityLog
from .repository import ActivityRepository


class MySQLActivityRepository(ActivityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(
        self,
        *,
        log_id: str,
        action: str,
        user_id: Optional[str],
        task_id: Optional[str],
        details: str,
    ) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO activity_logs (log_id, action, user_id, task_id, details) VALUES (%s, %s, %s, %s, %s)",
                (log_id, action, user_id, task_id, details),
            )
        return log_id

    def list_recent(self, limit: int) -> Sequence[ActivityLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT log_id, action, user_id, task_id, details, logged_at
                FROM activity_logs
                ORDER BY logged_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                ActivityLog(
                    log_id=r["log_id"],
                    action=r["action"],
                    user_id=r.get("user_id"),
                    task_id=r.get("task_id"),
                    details=r.get("details") or "",
                    logged_at=normalize_mysql_datetime(r.get("logged_at")),
                )
                for r in fetchall(cur)
            ]
