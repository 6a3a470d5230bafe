from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ActivityLog


class ActivityRepository(Protocol):
    """Append-only: there is no update or delete."""

    def append(
        self,
        *,
        log_id: str,
        action: str,
        user_id: Optional[str],
        task_id: Optional[str],
        details: str,
    ) -> str:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[ActivityLog]:
        raise NotImplementedError
