from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.enums import Role
from ..core.exceptions import AuthenticationError


@dataclass(frozen=True)
class TokenClaims:
    uid: str
    email: str
    role: Role


class TokenService:
    """Signed, time-limited bearer tokens carrying uid, email and a role claim."""

    SALT = "task-manager-auth"

    def __init__(self, secret_key: str, *, max_age_seconds: int = 3600):
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self.SALT)
        self._max_age = int(max_age_seconds)

    def issue(self, *, uid: str, email: str, role: Role) -> str:
        return self._serializer.dumps({"uid": uid, "email": email, "role": role.value})

    def verify(self, token: Optional[str]) -> TokenClaims:
        if not token:
            raise AuthenticationError("Missing token")
        try:
            data = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired:
            raise AuthenticationError("Token expired")
        except BadSignature:
            raise AuthenticationError("Invalid token")

        try:
            return TokenClaims(uid=str(data["uid"]), email=str(data.get("email") or ""), role=Role(data.get("role")))
        except (KeyError, ValueError, TypeError):
            raise AuthenticationError("Invalid token")


def bearer_token(header_value: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not header_value or not header_value.startswith("Bearer "):
        return None
    token = header_value[7:].strip()
    return token or None
