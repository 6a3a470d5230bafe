from __future__ import annotations

import uuid
from typing import Any, Optional, Sequence

from ..common.validators import require_non_empty, require_range
from ..core.exceptions import NotFoundError
from .model import Assignment
from .repository import AssignmentRepository


class AssignmentService:
    def __init__(self, assignments: AssignmentRepository):
        self._assignments = assignments

    def create_assignment(self, *, employee_id: str, task_id: str, progress: Any = 0, note: str = "") -> str:
        employee_id = require_non_empty(employee_id, "Employee")
        task_id = require_non_empty(task_id, "Task")
        value = int(require_range(progress or 0, "Progress", 0, 100))
        return self._assignments.create(
            assignment_id=uuid.uuid4().hex,
            employee_id=employee_id,
            task_id=task_id,
            progress=value,
            note=(note or "").strip(),
        )

    def get_assignment(self, assignment_id: str) -> Assignment:
        assignment = self._assignments.get_by_id(assignment_id)
        if not assignment:
            raise NotFoundError("Assignment not found")
        return assignment

    def list_for_employee(self, employee_id: str) -> Sequence[Assignment]:
        return self._assignments.list_for_employee(employee_id)

    def update_progress(self, assignment_id: str, *, progress: Any, note: Optional[str] = None) -> Assignment:
        value = int(require_range(progress, "Progress", 0, 100))
        if not self._assignments.update_progress(assignment_id, progress=value, note=note):
            raise NotFoundError("Assignment not found")
        return self._assignments.get_by_id(assignment_id)
