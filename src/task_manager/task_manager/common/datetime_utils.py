from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

from ..core.constants import MONTH_NAMES


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now()


def parse_date_input(value: Any) -> Optional[datetime]:
    """Best-effort conversion of form/spreadsheet values into a datetime.

    Accepts datetime, date, pandas Timestamps and ISO-like strings. Empty values
    give None; anything unparseable raises ValueError.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    to_py = getattr(value, "to_pydatetime", None)
    if callable(to_py):
        return parse_date_input(to_py())

    text = str(value).strip()
    if not text or text.lower() in {"nan", "nat", "none"}:
        return None
    for fmt in ("%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y/%m/%d", "%d/%m/%Y", "%m/%d/%Y"):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    return parsed.replace(tzinfo=None) if parsed.tzinfo else parsed


def to_midnight(value: datetime | date) -> datetime:
    if isinstance(value, datetime):
        return datetime.combine(value.date(), time.min)
    return datetime.combine(value, time.min)


def months_before(value: datetime, months: int) -> datetime:
    return value - relativedelta(months=int(months))


def month_index(name: str) -> int:
    """0-based month index for an English month name, -1 when unknown."""
    lowered = (name or "").strip().lower()
    for idx, month in enumerate(MONTH_NAMES):
        if month.lower() == lowered:
            return idx
    return -1
