from __future__ import annotations

import re
from typing import Any

from ..core.constants import DEFAULT_PRIORITY
from ..core.enums import Priority, TaskStatus

_SEPARATORS = re.compile(r"[_\-]")


def canonical_status(raw: Any) -> TaskStatus:
    """Map any stored status string onto one of the four canonical states.

    Substring matches are checked in a fixed order (complete, cancel, delay);
    everything else, including empty, ``pending`` and ``in progress``, is
    ``in process``.
    """
    if isinstance(raw, TaskStatus):
        return raw
    text = _SEPARATORS.sub(" ", str(raw or "").strip().lower())
    if "complete" in text:
        return TaskStatus.COMPLETED
    if "cancel" in text:
        return TaskStatus.CANCELLED
    if "delay" in text:
        return TaskStatus.DELAYED
    return TaskStatus.IN_PROCESS


def normalize_priority(raw: Any) -> Priority:
    text = str(raw or "").strip().lower()
    if "high" in text or "urgent" in text:
        return Priority.HIGH
    if "low" in text:
        return Priority.LOW
    return Priority(DEFAULT_PRIORITY)
