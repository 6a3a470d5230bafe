from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, normalize_mysql_datetime
from .model import NewUser, User
from .repository import UserRepository

_COLUMNS = "uid, email, name, role, department, phone, created_at, updated_at"
_UPDATABLE = {"email", "name", "role", "department", "phone"}


def _row_to_user(row: dict) -> User:
    try:
        role = Role((row.get("role") or Role.EMPLOYEE.value).lower())
    except ValueError:
        role = Role.EMPLOYEE
    return User(
        uid=row["uid"],
        email=row.get("email") or "",
        name=row.get("name") or "",
        role=role,
        department=row.get("department"),
        phone=row.get("phone"),
        created_at=normalize_mysql_datetime(row.get("created_at")),
        updated_at=normalize_mysql_datetime(row.get("updated_at")),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, uid: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE uid=%s", (uid,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE LOWER(email)=LOWER(%s) LIMIT 1", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY name")
            return [_row_to_user(r) for r in fetchall(cur)]

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY name", (role.value,))
            return [_row_to_user(r) for r in fetchall(cur)]

    def create(self, uid: str, user: NewUser) -> str:
        return self.bulk_create([(uid, user)])[0]

    def bulk_create(self, items: Sequence[tuple[str, NewUser]]) -> list[str]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                for uid, user in items:
                    cur.execute(
                        """
                        INSERT INTO users (uid, email, name, role, department, phone)
                        VALUES (%s, %s, %s, %s, %s, %s)
                        """,
                        (uid, user.email, user.name, user.role.value, user.department, user.phone),
                    )
        except Exception as e:
            if is_duplicate_key(e):
                raise ConflictError("User already exists") from e
            raise
        return [uid for uid, _ in items]

    def update(self, uid: str, fields: dict) -> bool:
        values = {k: v for k, v in fields.items() if k in _UPDATABLE}
        if not values:
            return False
        if isinstance(values.get("role"), Role):
            values["role"] = values["role"].value
        assignments = ", ".join(f"{col}=%s" for col in values)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {assignments} WHERE uid=%s", (*values.values(), uid))
            return cur.rowcount > 0

    def delete(self, uid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE uid=%s", (uid,))
            return cur.rowcount > 0
