from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewTask, Task


class TaskRepository(Protocol):
    def get_by_id(self, task_id: str) -> Optional[Task]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Task]:
        """All tasks, newest first."""

        raise NotImplementedError

    def list_by_assignee(self, *, uid: Optional[str], email: Optional[str]) -> Sequence[Task]:
        raise NotImplementedError

    def create(self, task_id: str, task: NewTask) -> str:
        raise NotImplementedError

    def bulk_create(self, items: Sequence[tuple[str, NewTask]]) -> list[str]:
        """Create several tasks in one transaction (all or nothing)."""

        raise NotImplementedError

    def update(self, task_id: str, fields: dict) -> bool:
        raise NotImplementedError

    def delete(self, task_id: str) -> bool:
        raise NotImplementedError

    def delete_for_assignee(self, *, uid: Optional[str], email: Optional[str]) -> list[str]:
        """Delete tasks assigned to uid or email in one transaction; returns deleted ids."""

        raise NotImplementedError
