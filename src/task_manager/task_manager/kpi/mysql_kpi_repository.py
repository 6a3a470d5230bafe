from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, normalize_mysql_datetime
from .model import KpiScore
from .repository import KpiRepository

_COLUMNS = "score_id, user_id, user_name, user_email, year, month, score, added_by, added_at"


def _row_to_score(row: dict) -> KpiScore:
    return KpiScore(
        score_id=row["score_id"],
        user_id=row["user_id"],
        user_name=row.get("user_name"),
        user_email=row.get("user_email"),
        year=int(row["year"]),
        month=row["month"],
        score=float(row["score"]),
        added_by=row.get("added_by"),
        added_at=normalize_mysql_datetime(row.get("added_at")),
    )


class MySQLKpiRepository(KpiRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_if_absent(self, score: KpiScore) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO kpi_scores (score_id, user_id, user_name, user_email, year, month, score, added_by)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        score.score_id,
                        score.user_id,
                        score.user_name,
                        score.user_email,
                        score.year,
                        score.month,
                        score.score,
                        score.added_by,
                    ),
                )
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e):
                return False
            raise
        return True

    def get_by_id(self, score_id: str) -> Optional[KpiScore]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM kpi_scores WHERE score_id=%s", (score_id,))
            row = fetchone(cur)
            return _row_to_score(row) if row else None

    def list_for_user(self, user_id: str) -> Sequence[KpiScore]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM kpi_scores WHERE user_id=%s", (user_id,))
            return [_row_to_score(r) for r in fetchall(cur)]

    def list_for_email(self, email: str) -> Sequence[KpiScore]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM kpi_scores WHERE LOWER(user_email)=LOWER(%s)", (email,))
            return [_row_to_score(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[KpiScore]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM kpi_scores ORDER BY year DESC, added_at DESC")
            return [_row_to_score(r) for r in fetchall(cur)]
