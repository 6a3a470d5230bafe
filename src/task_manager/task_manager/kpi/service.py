from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from ..common.datetime_utils import month_index
from ..common.validators import require_non_empty, require_range
from ..core.constants import MONTH_NAMES
from ..core.exceptions import ConflictError, ValidationError
from ..evaluation.engine import round_half_up
from ..events.feed import merge_by_id
from .model import KpiScore, score_id_for
from .repository import KpiRepository

logger = logging.getLogger(__name__)


def sort_newest_first(scores: Iterable[KpiScore]) -> List[KpiScore]:
    return sorted(scores, key=lambda s: (s.year, month_index(s.month)), reverse=True)


def average_score(scores: Sequence[KpiScore]) -> int:
    if not scores:
        return 0
    return round_half_up(sum(s.score for s in scores) / len(scores))


class KpiService:
    """Monthly KPI scores. Scores are write-once: there is no edit operation."""

    def __init__(self, scores: KpiRepository):
        self._scores = scores

    def record_monthly_score(
        self,
        *,
        user_id: str,
        user_name: str,
        month: str,
        year,
        score,
        added_by: Optional[str] = None,
        user_email: Optional[str] = None,
    ) -> str:
        user_id = require_non_empty(user_id, "Employee")
        month = require_non_empty(month, "Month")
        idx = month_index(month)
        if idx < 0:
            raise ValidationError("Month must be a month name (e.g. January)")
        month = MONTH_NAMES[idx]
        try:
            year = int(year)
        except (TypeError, ValueError):
            raise ValidationError("Year must be a number")
        if year <= 0:
            raise ValidationError("Year must be positive")
        value = require_range(score, "Score", 0, None)

        record = KpiScore(
            score_id=score_id_for(user_id, year, month),
            user_id=user_id,
            user_name=(user_name or "").strip() or None,
            user_email=(user_email or "").strip() or None,
            year=year,
            month=month,
            score=value,
            added_by=added_by,
        )
        if not self._scores.create_if_absent(record):
            raise ConflictError(f"Score already exists for {record.user_name or user_id} in {month} {year}")
        logger.info("KPI score %s recorded by %s", record.score_id, added_by)
        return record.score_id

    def scores_for_user(self, user_id: str) -> List[KpiScore]:
        return sort_newest_first(self._scores.list_for_user(user_id))

    def scores_for_owner(self, *, uid: str, email: Optional[str] = None) -> List[KpiScore]:
        """Scores filed under the uid or under the email (as given and lowercased), merged by id."""
        groups = [self._scores.list_for_user(uid)] if uid else []
        emails = []
        if email:
            emails.append(email)
            if email.lower() != email:
                emails.append(email.lower())
        groups.extend(self._scores.list_for_email(e) for e in emails)
        return sort_newest_first(merge_by_id(lambda s: s.score_id, *groups))

    def average_for_user(self, user_id: str) -> int:
        return average_score(self._scores.list_for_user(user_id))

    def all_scores(self) -> List[KpiScore]:
        return sort_newest_first(self._scores.list_all())

    def averages_by_user(self) -> dict:
        grouped: dict[str, list[KpiScore]] = {}
        for s in self._scores.list_all():
            grouped.setdefault(s.user_id, []).append(s)
        return {uid: average_score(items) for uid, items in grouped.items()}
