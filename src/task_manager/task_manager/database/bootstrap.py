"""Schema setup and demo accounts for local development.

Used by ``create_app`` (AUTO_INIT_DB / AUTO_SEED_DB) and by the scripts in
``scripts/``.
"""
from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path
from typing import Iterator, List

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig, DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

# schema.sql pins its own database name; the configured one wins
_DB_SELECTION = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")

DEMO_ACCOUNTS = (
    ("Admin Demo", "admin@example.com", "admin"),
    ("Employee Demo", "employee@example.com", "employee"),
)


def split_statements(sql: str) -> Iterator[str]:
    """Yield the statements of a SQL script; a ``;`` inside quotes does not end one."""
    start = 0
    quote = None
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1
    tail = sql[start:].strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = mysql.connector.connect(host=target.host, port=target.port, user=target.user, password=target.password)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    script = Path(schema_path).read_text(encoding="utf-8")
    script = _LINE_COMMENT.sub("", _DB_SELECTION.sub("", script))

    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as (_, cur):
        for stmt in split_statements(script):
            cur.execute(stmt)
    logger.info("Schema applied from %s", schema_path)


def ensure_demo_users(db_config: dict, *, admin_password: str = "admin123", employee_password: str = "12345678") -> None:
    """Create the demo admin and employee, or reset their passwords when they exist."""
    passwords = {"admin": admin_password, "employee": employee_password}

    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config))) as (_, cur):
        for name, email, role in DEMO_ACCOUNTS:
            password_hash = generate_password_hash(passwords[role])
            cur.execute("SELECT uid FROM identities WHERE email=%s", (email,))
            row = cur.fetchone()
            if row:
                uid = row["uid"]
                cur.execute("UPDATE identities SET password_hash=%s, disabled=0 WHERE uid=%s", (password_hash, uid))
            else:
                uid = uuid.uuid4().hex
                cur.execute(
                    "INSERT INTO identities (uid, email, password_hash) VALUES (%s, %s, %s)",
                    (uid, email, password_hash),
                )
            cur.execute(
                "INSERT INTO users (uid, email, name, role) VALUES (%s, %s, %s, %s) "
                "ON DUPLICATE KEY UPDATE name=VALUES(name), role=VALUES(role)",
                (uid, email, name, role),
            )
    logger.info("Demo accounts ready (%d)", len(DEMO_ACCOUNTS))


def list_tables(db_config: dict) -> List[str]:
    with db_cursor(DatabaseConnection(DBConfig.from_dict(db_config)), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
