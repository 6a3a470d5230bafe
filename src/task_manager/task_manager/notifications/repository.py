from __future__ import annotations

from typing import Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def bulk_append(self, items: Sequence[Notification]) -> list[str]:
        """Append several notifications in one transaction."""

        raise NotImplementedError

    def list_for_uid(self, uid: str) -> Sequence[Notification]:
        raise NotImplementedError

    def list_for_email(self, email: str) -> Sequence[Notification]:
        raise NotImplementedError
