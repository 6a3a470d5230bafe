from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import KpiScore


class KpiRepository(Protocol):
    def create_if_absent(self, score: KpiScore) -> bool:
        """Insert ``score``; return False (and write nothing) if its id already exists."""

        raise NotImplementedError

    def get_by_id(self, score_id: str) -> Optional[KpiScore]:
        raise NotImplementedError

    def list_for_user(self, user_id: str) -> Sequence[KpiScore]:
        raise NotImplementedError

    def list_for_email(self, email: str) -> Sequence[KpiScore]:
        raise NotImplementedError

    def list_all(self) -> Sequence[KpiScore]:
        raise NotImplementedError
