from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: user profile document.

    Note: Credentials live with the identity provider, never on the profile.
    """

    uid: str
    email: str
    name: str
    role: Role = Role.EMPLOYEE
    department: Optional[str] = None
    phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email or self.uid

    def to_dict(self) -> dict:
        return {
            "id": self.uid,
            "uid": self.uid,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "department": self.department,
            "phone": self.phone,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class NewUser:
    email: str
    name: str
    role: Role = Role.EMPLOYEE
    department: Optional[str] = None
    phone: Optional[str] = None
