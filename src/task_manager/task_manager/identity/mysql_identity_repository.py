from __future__ import annotations

from typing import Optional

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key, normalize_mysql_datetime
from .model import Identity
from .repository import IdentityRepository

_COLUMNS = "uid, email, password_hash, disabled, created_at"


def _row_to_identity(row: dict) -> Identity:
    return Identity(
        uid=row["uid"],
        email=row["email"],
        password_hash=row["password_hash"],
        disabled=bool(row.get("disabled", False)),
        created_at=normalize_mysql_datetime(row.get("created_at")),
    )


class MySQLIdentityRepository(IdentityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_uid(self, uid: str) -> Optional[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM identities WHERE uid=%s", (uid,))
            row = fetchone(cur)
            return _row_to_identity(row) if row else None

    def get_by_email(self, email: str) -> Optional[Identity]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM identities WHERE LOWER(email)=LOWER(%s)", (email,))
            row = fetchone(cur)
            return _row_to_identity(row) if row else None

    def create(self, *, uid: str, email: str, password_hash: str) -> str:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO identities (uid, email, password_hash) VALUES (%s, %s, %s)",
                    (uid, email, password_hash),
                )
        except Exception as e:
            if is_duplicate_key(e):
                raise ConflictError("An account with this email already exists") from e
            raise
        return uid

    def delete(self, uid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM identities WHERE uid=%s", (uid,))
            return cur.rowcount > 0
