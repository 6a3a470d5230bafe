from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import NewUser, User


class UserRepository(Protocol):
    """Repository interface for user profiles.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, uid: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[User]:
        raise NotImplementedError

    def create(self, uid: str, user: NewUser) -> str:
        raise NotImplementedError

    def bulk_create(self, items: Sequence[tuple[str, NewUser]]) -> list[str]:
        """Create several profiles in one transaction (all or nothing)."""

        raise NotImplementedError

    def update(self, uid: str, fields: dict) -> bool:
        raise NotImplementedError

    def delete(self, uid: str) -> bool:
        raise NotImplementedError
