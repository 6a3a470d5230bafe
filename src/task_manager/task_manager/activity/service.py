from __future__ import annotations

import logging
import uuid
from typing import Callable, List, Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_ACTIVITY_LIMIT
from ..events.bus import TASKS_TOPIC, USERS_TOPIC, ChangeEvent, EventBus
from .model import ActivityLog
from .repository import ActivityRepository

logger = logging.getLogger(__name__)


class ActivityService:
    def __init__(self, logs: ActivityRepository):
        self._logs = logs

    def log_activity(
        self,
        action: str,
        *,
        user_id: Optional[str] = None,
        task_id: Optional[str] = None,
        details: str = "",
    ) -> str:
        action = require_non_empty(action, "Action")
        return self._logs.append(
            log_id=uuid.uuid4().hex,
            action=action,
            user_id=user_id,
            task_id=task_id,
            details=details or "",
        )

    def recent(self, limit: int = DEFAULT_ACTIVITY_LIMIT) -> Sequence[ActivityLog]:
        limit = max(1, int(limit or DEFAULT_ACTIVITY_LIMIT))
        return self._logs.list_recent(limit)


class ActivityRecorder:
    """Writes an activity entry for every task/user change published on the bus."""

    def __init__(self, activity: ActivityService):
        self._activity = activity
        self._unsubscribers: List[Callable[[], None]] = []

    def attach(self, bus: EventBus) -> None:
        self._unsubscribers.append(bus.subscribe(TASKS_TOPIC, self._on_task))
        self._unsubscribers.append(bus.subscribe(USERS_TOPIC, self._on_user))

    def detach(self) -> None:
        while self._unsubscribers:
            self._unsubscribers.pop()()

    def _on_task(self, event: ChangeEvent) -> None:
        action = event.details.get("action")
        if not action:
            return
        self._activity.log_activity(
            action,
            user_id=event.actor_id,
            task_id=event.doc_id,
            details=event.details.get("message", ""),
        )

    def _on_user(self, event: ChangeEvent) -> None:
        action = event.details.get("action")
        if not action:
            return
        # user events: the subject goes in user_id, the actor in the details text
        details = event.details.get("message", "")
        if event.actor_id and event.actor_id != event.doc_id:
            details = f"{details} by {event.actor_id}"
        self._activity.log_activity(action, user_id=event.doc_id, details=details)
