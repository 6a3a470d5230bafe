from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def score_id_for(user_id: str, year: int, month: str) -> str:
    return f"{user_id}_{year}_{month}"


@dataclass(frozen=True)
class KpiScore:
    """One monthly KPI score; at most one per (user, year, month)."""

    score_id: str
    user_id: str
    year: int
    month: str
    score: float
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    added_by: Optional[str] = None
    added_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.score_id,
            "userId": self.user_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "year": self.year,
            "month": self.month,
            "score": self.score,
            "addedBy": self.added_by,
            "addedAt": self.added_at.isoformat() if self.added_at else None,
        }
