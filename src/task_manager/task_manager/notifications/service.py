from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Collection, Iterable, List, Optional, Sequence

from ..core.exceptions import ValidationError
from ..evaluation.reminders import Reminder
from ..events.feed import merge_by_id
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


def reminder_title(reminder: Reminder) -> str:
    return f"Task reminder: {reminder.title}"


def reminder_message(reminder: Reminder, signature: str = "") -> str:
    days_text = f"{reminder.days_left} day(s)" if reminder.days_left is not None else "N/A"
    message = f'Reminder: Task "{reminder.title}" is due in {days_text}. Please complete it.'
    if signature:
        message = f"{message}\n\n{signature}"
    return message


def _sort_key(n: Notification) -> datetime:
    return n.created_at or datetime.min


def merge_notifications(existing: Iterable[Notification], incoming: Iterable[Notification]) -> List[Notification]:
    """Identifier-keyed merge, incoming entries overwrite; newest first."""
    merged = merge_by_id(lambda n: n.notification_id, existing, incoming)
    return sorted(merged, key=_sort_key, reverse=True)


class NotificationService:
    def __init__(self, notifications: NotificationRepository, *, signature: str = ""):
        self._notifications = notifications
        self._signature = signature

    def send_task_reminders(
        self,
        reminders: Sequence[Reminder],
        selected_ids: Collection[str],
        *,
        sent_by: Optional[str],
    ) -> List[str]:
        """One notification per selected reminder, written in one batch."""
        if not selected_ids:
            raise ValidationError("Select at least one task to send portal reminders.")
        selected = set(selected_ids)
        items = [
            Notification(
                notification_id=uuid.uuid4().hex,
                task_id=r.task_id,
                recipient_uid=r.assigned_uid or None,
                recipient_email=r.assigned_email or None,
                title=reminder_title(r),
                message=reminder_message(r, self._signature),
                sent_by=sent_by or "admin",
            )
            for r in reminders
            if r.task_id in selected
        ]
        ids = self._notifications.bulk_append(items)
        logger.info("Created %d portal reminder(s)", len(ids))
        return ids

    def list_for_recipient(self, *, uid: Optional[str], email: Optional[str]) -> List[Notification]:
        by_uid = self._notifications.list_for_uid(uid) if uid else []
        by_email = self._notifications.list_for_email(email) if email else []
        return merge_notifications(by_uid, by_email)

    @staticmethod
    def reminders_only(notifications: Iterable[Notification], task_ids: Optional[Collection[str]] = None) -> List[Notification]:
        """Keep reminder-looking entries; with ``task_ids``, drop those about other tasks."""
        out = []
        for n in notifications:
            if "reminder" not in n.title.lower() and "reminder" not in n.message.lower():
                continue
            if task_ids is not None and n.task_id and n.task_id not in task_ids:
                continue
            out.append(n)
        return out
