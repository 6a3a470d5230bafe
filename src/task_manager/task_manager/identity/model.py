from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Identity:
    """Credential record held by the identity provider (separate from the profile)."""

    uid: str
    email: str
    password_hash: str
    disabled: bool = False
    created_at: Optional[datetime] = None
