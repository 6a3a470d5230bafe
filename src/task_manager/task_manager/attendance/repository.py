from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceEntry


class AttendanceRepository(Protocol):
    def upsert_many(self, entries: Sequence[AttendanceEntry]) -> list[str]:
        """Insert or overwrite entries by id, in one transaction."""

        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    def list_for_user(self, user_id: str) -> Sequence[AttendanceEntry]:
        raise NotImplementedError
