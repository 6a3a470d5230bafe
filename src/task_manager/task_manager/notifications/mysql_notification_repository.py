from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_datetime
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = "notification_id, task_id, recipient_uid, recipient_email, title, message, sent_by, is_read, created_at"


def _row_to_notification(row: dict) -> Notification:
    return Notification(
        notification_id=row["notification_id"],
        task_id=row.get("task_id"),
        recipient_uid=row.get("recipient_uid"),
        recipient_email=row.get("recipient_email"),
        title=row["title"],
        message=row["message"],
        sent_by=row.get("sent_by"),
        read=bool(row.get("is_read")),
        created_at=normalize_mysql_datetime(row.get("created_at")),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def bulk_append(self, items: Sequence[Notification]) -> list[str]:
        if not items:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO notifications
                    (notification_id, task_id, recipient_uid, recipient_email, title, message, sent_by, is_read)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                [
                    (
                        n.notification_id,
                        n.task_id,
                        n.recipient_uid,
                        n.recipient_email,
                        n.title,
                        n.message,
                        n.sent_by,
                        1 if n.read else 0,
                    )
                    for n in items
                ],
            )
        return [n.notification_id for n in items]

    def list_for_uid(self, uid: str) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM notifications WHERE recipient_uid=%s", (uid,))
            return [_row_to_notification(r) for r in fetchall(cur)]

    def list_for_email(self, email: str) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM notifications WHERE recipient_email=%s", (email,))
            return [_row_to_notification(r) for r in fetchall(cur)]
