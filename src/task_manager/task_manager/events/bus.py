from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

TASKS_TOPIC = "tasks"
USERS_TOPIC = "users"


@dataclass(frozen=True)
class ChangeEvent:
    """A single document change: ``upsert`` carries the new document, ``delete`` only the id."""

    kind: str
    doc_id: str
    payload: Optional[Any] = None
    actor_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def upsert(cls, doc_id: str, payload: Any, *, actor_id: Optional[str] = None, **details) -> "ChangeEvent":
        return cls(kind="upsert", doc_id=str(doc_id), payload=payload, actor_id=actor_id, details=details)

    @classmethod
    def delete(cls, doc_id: str, *, actor_id: Optional[str] = None, **details) -> "ChangeEvent":
        return cls(kind="delete", doc_id=str(doc_id), actor_id=actor_id, details=details)


Handler = Callable[[ChangeEvent], None]


class EventBus:
    """In-process publish/subscribe for document change events.

    Delivery is synchronous and in subscription order. A failing handler is
    logged and does not prevent delivery to the others.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, topic: str, handler: Handler) -> Callable[[], None]:
        with self._lock:
            self._handlers[topic].append(handler)

        def unsubscribe() -> None:
            with self._lock:
                handlers = self._handlers.get(topic, [])
                if handler in handlers:
                    handlers.remove(handler)

        return unsubscribe

    def publish(self, topic: str, event: ChangeEvent) -> None:
        with self._lock:
            handlers = list(self._handlers.get(topic, []))
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler failed for topic=%s doc_id=%s", topic, event.doc_id)
