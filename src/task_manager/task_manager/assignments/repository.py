from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Assignment


class AssignmentRepository(Protocol):
    def create(self, *, assignment_id: str, employee_id: str, task_id: str, progress: int, note: str) -> str:
        raise NotImplementedError

    def get_by_id(self, assignment_id: str) -> Optional[Assignment]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[Assignment]:
        raise NotImplementedError

    def update_progress(self, assignment_id: str, *, progress: int, note: Optional[str]) -> bool:
        raise NotImplementedError
