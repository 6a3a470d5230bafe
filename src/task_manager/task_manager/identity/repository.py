from __future__ import annotations

from typing import Optional, Protocol

from .model import Identity


class IdentityRepository(Protocol):
    def get_by_uid(self, uid: str) -> Optional[Identity]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Identity]:
        raise NotImplementedError

    def create(self, *, uid: str, email: str, password_hash: str) -> str:
        raise NotImplementedError

    def delete(self, uid: str) -> bool:
        raise NotImplementedError
