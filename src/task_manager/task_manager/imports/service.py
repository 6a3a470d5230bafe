from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..tasks.service import TaskService
from ..users.model import NewUser
from ..users.service import UserService
from .rows import extract_task_row, extract_user_row

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportReport:
    accepted: int
    skipped: int
    ids: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"accepted": self.accepted, "skipped": self.skipped, "ids": list(self.ids)}


class BulkImportService:
    def __init__(self, tasks: TaskService, users: UserService):
        self._tasks = tasks
        self._users = users

    def import_tasks(
        self,
        rows: Iterable[Mapping],
        *,
        assigned_to: Optional[str] = None,
        assigned_email: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> ImportReport:
        if not (assigned_to or "").strip() and not (assigned_email or "").strip():
            raise ValidationError("Please choose or enter an assignee.")

        rows = list(rows)
        payloads = []
        for row in rows:
            parsed = extract_task_row(row)
            if parsed is None:
                continue
            payloads.append(
                {
                    "title": parsed.title,
                    "startDate": parsed.start_date,
                    "endDate": parsed.end_date,
                    "priority": parsed.priority.value,
                    "status": parsed.status,
                    "assignedTo": assigned_to,
                    "assignedEmail": assigned_email,
                }
            )
        if not payloads:
            raise ValidationError("No valid task rows found in file. Ensure there is a title column.")

        result = self._tasks.bulk_create(payloads, created_by=created_by)
        ids = [r.task_id for r in result.results if r.ok]
        report = ImportReport(accepted=len(ids), skipped=len(rows) - len(ids), ids=ids)
        logger.info("Task import: %d accepted, %d skipped", report.accepted, report.skipped)
        return report

    def import_users(self, rows: Iterable[Mapping], *, actor_id: Optional[str] = None) -> ImportReport:
        rows = list(rows)
        seen: set[str] = set()
        profiles: list[NewUser] = []
        for row in rows:
            parsed = extract_user_row(row)
            if parsed is None:
                continue
            key = parsed.email.lower()
            if key in seen or self._users.email_in_use(parsed.email):
                continue
            seen.add(key)
            profiles.append(NewUser(email=parsed.email, name=parsed.name or parsed.email, role=Role.EMPLOYEE))

        if not profiles:
            if not any(extract_user_row(r) for r in rows):
                raise ValidationError("No valid user rows found in file. Ensure there is a Name and mail id column.")
            return ImportReport(accepted=0, skipped=len(rows))

        ids = self._users.bulk_create(profiles, actor_id=actor_id)
        report = ImportReport(accepted=len(ids), skipped=len(rows) - len(ids), ids=ids)
        logger.info("User import: %d accepted, %d skipped", report.accepted, report.skipped)
        return report
