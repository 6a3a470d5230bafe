"""Spreadsheet rows -> normalized task / user rows.

Header names are matched loosely: ``Start Date``, ``start_date`` and
``startdate`` are the same column.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime
from typing import IO, Any, Dict, List, Mapping, Optional

import pandas as pd
from werkzeug.utils import secure_filename

from ..common.datetime_utils import parse_date_input
from ..common.validators import require_email
from ..core.enums import Priority
from ..core.exceptions import ValidationError
from ..evaluation.status import normalize_priority
from ..tasks.service import normalize_status_label

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".csv", ".xlsx"}
_KEY_NOISE = re.compile(r"[\s_]")


def normalize_key(key: Any) -> str:
    return _KEY_NOISE.sub("", str(key).lower())


def _blank(value: Any) -> bool:
    if value is None:
        return True
    try:
        if pd.isna(value):
            return True
    except (TypeError, ValueError):
        pass
    return not str(value).strip()


class RowMapping:
    """Read-only view of one row keyed by normalized header names."""

    def __init__(self, row: Mapping[Any, Any]):
        self._values: Dict[str, Any] = {}
        for key, value in (row or {}).items():
            self._values[normalize_key(key)] = value

    def first(self, *keys: str) -> Any:
        """Value of the first listed key that is present and not blank."""
        for key in keys:
            value = self._values.get(normalize_key(key))
            if not _blank(value):
                return value
        return None

    def text(self, *keys: str) -> str:
        value = self.first(*keys)
        return str(value).strip() if value is not None else ""


@dataclass(frozen=True)
class TaskRow:
    title: str
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    priority: Priority
    status: str


@dataclass(frozen=True)
class UserRow:
    name: str
    email: str


def extract_task_row(row: Mapping[Any, Any]) -> Optional[TaskRow]:
    """None when the row has no title or carries a date that cannot be parsed."""
    m = RowMapping(row)
    title = m.text("title", "task")
    if not title:
        return None
    try:
        start_date = parse_date_input(m.first("startdate"))
        end_date = parse_date_input(m.first("enddate", "duedate"))
    except (TypeError, ValueError):
        logger.info("Skipping task row %r: malformed date", title)
        return None
    return TaskRow(
        title=title,
        start_date=start_date,
        end_date=end_date,
        priority=normalize_priority(m.first("priority")),
        status=normalize_status_label(m.first("status", "taskstatus")),
    )


def extract_user_row(row: Mapping[Any, Any]) -> Optional[UserRow]:
    m = RowMapping(row)
    email = m.text("mailid", "mail", "email")
    if not email:
        return None
    try:
        require_email(email)
    except ValidationError:
        logger.info("Skipping user row %r: invalid email", email)
        return None
    return UserRow(name=m.text("name"), email=email)


def read_rows(filename: str, stream: IO[bytes]) -> List[dict]:
    """Parse an uploaded CSV or XLSX (first sheet) into a list of dict rows."""
    name = secure_filename(filename or "")
    _, ext = os.path.splitext(name.lower())
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError("Unsupported file type (use .csv or .xlsx)")

    try:
        if ext == ".csv":
            df = pd.read_csv(stream, dtype=str, keep_default_na=False, skip_blank_lines=True)
        else:
            df = pd.read_excel(stream, sheet_name=0, engine="openpyxl")
    except (ValueError, pd.errors.ParserError) as e:
        logger.warning("Could not parse upload %s: %s", name, e)
        raise ValidationError("Could not read the uploaded file") from e

    df = df.dropna(how="all")
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")
