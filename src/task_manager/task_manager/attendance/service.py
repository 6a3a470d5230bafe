from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Sequence

from ..common.datetime_utils import now_local, parse_date_input
from ..core.constants import ATTENDANCE_WEIGHTS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..users.model import User
from .model import AttendanceEntry, entry_id_for
from .repository import AttendanceRepository

_ALIASES = {
    "halfday": AttendanceStatus.HALF_DAY,
    "halfdays": AttendanceStatus.HALF_DAY,
    "halfdayleave": AttendanceStatus.HALF_DAY,
    "half": AttendanceStatus.HALF_DAY,
    "shortleave": AttendanceStatus.SHORT_LEAVE,
    "shortleaves": AttendanceStatus.SHORT_LEAVE,
    "present": AttendanceStatus.PRESENT,
    "p": AttendanceStatus.PRESENT,
    "presentday": AttendanceStatus.PRESENT,
    "outdoor": AttendanceStatus.OUTDOOR,
    "out": AttendanceStatus.OUTDOOR,
    "field": AttendanceStatus.OUTDOOR,
    "onsite": AttendanceStatus.OUTDOOR,
    "absent": AttendanceStatus.ABSENT,
    "a": AttendanceStatus.ABSENT,
    "leave": AttendanceStatus.ABSENT,
    "sick": AttendanceStatus.ABSENT,
    "off": AttendanceStatus.OFF,
    "holiday": AttendanceStatus.OFF,
    "weekend": AttendanceStatus.OFF,
    "offday": AttendanceStatus.OFF,
}
_NON_LETTERS = re.compile(r"[^a-z]")


def normalize_attendance_status(value: Any) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    collapsed = _NON_LETTERS.sub("", str(value or "").strip().lower())
    status = _ALIASES.get(collapsed)
    if status is None:
        raise ValidationError(f"Unknown attendance status: {value!r}")
    return status


@dataclass(frozen=True)
class AttendanceSummary:
    present: int = 0
    outdoor: int = 0
    half_day: int = 0
    short_leave: int = 0
    absent: int = 0
    off: int = 0
    percentage: float = 0.0

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "outdoor": self.outdoor,
            "halfDay": self.half_day,
            "shortLeave": self.short_leave,
            "absent": self.absent,
            "off": self.off,
            "percentage": self.percentage,
        }


def summarize_attendance(entries: Iterable[AttendanceEntry]) -> AttendanceSummary:
    """Counts per status plus the weighted attendance percentage ("off" days are not counted)."""
    counts = {s: 0 for s in AttendanceStatus}
    for e in entries:
        counts[e.status] += 1

    numerator = sum(counts[AttendanceStatus(k)] * w for k, w in ATTENDANCE_WEIGHTS.items())
    denominator = sum(counts[AttendanceStatus(k)] for k in ATTENDANCE_WEIGHTS)
    percentage = numerator / denominator * 100 if denominator else 0.0
    return AttendanceSummary(
        present=counts[AttendanceStatus.PRESENT],
        outdoor=counts[AttendanceStatus.OUTDOOR],
        half_day=counts[AttendanceStatus.HALF_DAY],
        short_leave=counts[AttendanceStatus.SHORT_LEAVE],
        absent=counts[AttendanceStatus.ABSENT],
        off=counts[AttendanceStatus.OFF],
        percentage=percentage,
    )


def attendance_percentage(entries: Iterable[AttendanceEntry]) -> float:
    return summarize_attendance(entries).percentage


def _parse_work_date(value: Any) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    try:
        parsed = parse_date_input(value)
    except (TypeError, ValueError):
        parsed = None
    if parsed is None:
        raise ValidationError("Date is required (YYYY-MM-DD)")
    return parsed.date()


class AttendanceService:
    def __init__(self, entries: AttendanceRepository):
        self._entries = entries

    def _entry(self, user: User, work_date: date, status: AttendanceStatus, marked_at: datetime) -> AttendanceEntry:
        return AttendanceEntry(
            entry_id=entry_id_for(user.uid, work_date),
            user_id=user.uid,
            user_email=user.email,
            user_name=user.display_name,
            work_date=work_date,
            status=status,
            marked_at=marked_at,
        )

    def mark(self, user: User, work_date: Any, status: Any, *, now: Optional[datetime] = None) -> AttendanceEntry:
        entry = self._entry(user, _parse_work_date(work_date), normalize_attendance_status(status), now or now_local())
        self._entries.upsert_many([entry])
        return entry

    def bulk_mark(self, users: Sequence[User], work_date: Any, status: Any, *, now: Optional[datetime] = None) -> List[str]:
        day = _parse_work_date(work_date)
        status = normalize_attendance_status(status)
        marked_at = now or now_local()
        return self._entries.upsert_many([self._entry(u, day, status, marked_at) for u in users])

    def list_entries(self) -> Sequence[AttendanceEntry]:
        return self._entries.list_all()

    def summary_for_user(self, user_id: str, *, year: Optional[int] = None, month: Optional[int] = None) -> AttendanceSummary:
        entries = [
            e
            for e in self._entries.list_for_user(user_id)
            if (year is None or e.work_date.year == year) and (month is None or e.work_date.month == month)
        ]
        return summarize_attendance(entries)
