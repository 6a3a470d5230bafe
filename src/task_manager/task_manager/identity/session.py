from __future__ import annotations

from typing import MutableMapping, Optional

from ..core.enums import Role
from .service import SessionUser

_SESSION_KEY = "auth"


class SessionManager:
    """Explicit lifecycle for the signed-in user held in a session store.

    ``start`` is the only writer and ``end`` the only teardown; everything else
    reads through ``current``. The store is Flask's ``session`` in the web layer
    and a plain dict in tests.
    """

    def __init__(self, store: MutableMapping):
        self._store = store

    def start(self, user: SessionUser, *, permanent: bool = False) -> None:
        self._store.clear()
        self._store[_SESSION_KEY] = {
            "uid": user.uid,
            "email": user.email,
            "name": user.name,
            "role": user.role.value,
        }
        if hasattr(self._store, "permanent"):
            self._store.permanent = bool(permanent)

    def end(self) -> None:
        self._store.clear()

    def current(self) -> Optional[SessionUser]:
        data = self._store.get(_SESSION_KEY)
        if not data:
            return None
        try:
            return SessionUser(uid=data["uid"], email=data.get("email", ""), name=data.get("name", ""), role=Role(data["role"]))
        except (KeyError, ValueError):
            return None
