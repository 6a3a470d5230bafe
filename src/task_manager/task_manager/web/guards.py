from __future__ import annotations

from functools import wraps

from flask import g, request, session

from ..core.exceptions import AuthenticationError, AuthorizationError
from ..identity.service import SessionUser
from ..identity.session import SessionManager
from ..identity.tokens import bearer_token


def current_user() -> SessionUser:
    """The caller resolved by ``login_required`` / ``admin_required``."""
    return g.current_user


def make_guards(container):
    """Build ``login_required`` / ``admin_required`` bound to the container's auth service.

    A bearer token wins over the session cookie; the cookie is for browser use.
    """
    auth = container.auth_service

    def _resolve(*, admin: bool) -> SessionUser:
        token = bearer_token(request.headers.get("Authorization"))
        if token:
            claims = auth.verify_admin(token) if admin else auth.verify_token(token)
            user = auth.session_from_claims(claims)
        else:
            user = SessionManager(session).current()
            if user is None:
                raise AuthenticationError("No session")
            if admin and not user.is_admin:
                raise AuthorizationError("Admin access required")
        return user

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_user = _resolve(admin=False)
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.current_user = _resolve(admin=True)
            return view(*args, **kwargs)

        return wrapper

    return login_required, admin_required


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
