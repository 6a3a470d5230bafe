from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError
from ..events.bus import USERS_TOPIC, ChangeEvent, EventBus
from ..users.model import NewUser
from ..users.repository import UserRepository
from .repository import IdentityRepository
from .tokens import TokenClaims, TokenService

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class SessionUser:
    """What we keep for the signed-in user (session cookie or token claims)."""

    uid: str
    email: str
    name: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class AuthService:
    """Use cases of the identity provider: sign up / sign in / tokens / account removal."""

    def __init__(
        self,
        identities: IdentityRepository,
        users: UserRepository,
        tokens: TokenService,
        *,
        bus: Optional[EventBus] = None,
    ):
        self._identities = identities
        self._users = users
        self._tokens = tokens
        self._bus = bus

    def create_identity(self, email: str, password: str) -> str:
        email = require_email(email)
        require_min_length(password, "Password", 6)
        if self._identities.get_by_email(email):
            raise ConflictError("An account with this email already exists")
        uid = uuid.uuid4().hex
        return self._identities.create(uid=uid, email=email, password_hash=generate_password_hash(password))

    def sign_up(
        self,
        *,
        email: str,
        password: str,
        name: str,
        role: Role = Role.EMPLOYEE,
        department: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> SessionUser:
        name = require_non_empty(name, "Name")
        uid = self.create_identity(email, password)
        profile = NewUser(email=email.strip(), name=name, role=role, department=department, phone=phone)
        try:
            self._users.create(uid, profile)
        except Exception:
            # Compensate: do not leave an identity without a profile.
            logger.exception("Profile creation failed for uid=%s, removing identity", uid)
            self._identities.delete(uid)
            raise

        if self._bus:
            self._bus.publish(
                USERS_TOPIC,
                ChangeEvent.upsert(
                    uid,
                    self._users.get_by_id(uid),
                    actor_id=uid,
                    action="User Created",
                    message=f'User "{profile.email}" signed up',
                ),
            )
        return SessionUser(uid=uid, email=profile.email, name=name, role=role)

    def sign_in(self, email: str, password: str) -> SessionUser:
        identity = self._identities.get_by_email((email or "").strip())
        if not identity or identity.disabled:
            raise AuthenticationError(INVALID_CREDENTIALS)

        try:
            ok = check_password_hash(identity.password_hash, password or "")
        except Exception:
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError(INVALID_CREDENTIALS)

        profile = self._users.get_by_id(identity.uid)
        if not profile:
            return SessionUser(uid=identity.uid, email=identity.email, name=identity.email, role=Role.EMPLOYEE)
        return SessionUser(uid=profile.uid, email=profile.email or identity.email, name=profile.display_name, role=profile.role)

    def issue_token(self, user: SessionUser) -> str:
        return self._tokens.issue(uid=user.uid, email=user.email, role=user.role)

    def verify_token(self, token: Optional[str]) -> TokenClaims:
        claims = self._tokens.verify(token)
        identity = self._identities.get_by_uid(claims.uid)
        if not identity or identity.disabled:
            raise AuthenticationError("Account no longer exists")
        return claims

    def verify_admin(self, token: Optional[str]) -> TokenClaims:
        """The stored profile role wins; the claim is used only when no profile exists."""
        claims = self.verify_token(token)
        profile = self._users.get_by_id(claims.uid)
        role = profile.role if profile else claims.role
        if role == Role.ADMIN:
            return claims
        raise AuthorizationError("Admin access required")

    def session_from_claims(self, claims: TokenClaims) -> SessionUser:
        profile = self._users.get_by_id(claims.uid)
        if profile:
            return SessionUser(uid=profile.uid, email=profile.email, name=profile.display_name, role=profile.role)
        return SessionUser(uid=claims.uid, email=claims.email, name=claims.email, role=claims.role)

    def find_uid_by_email(self, email: str) -> Optional[str]:
        identity = self._identities.get_by_email(email)
        return identity.uid if identity else None

    def delete_identity(self, uid: str) -> bool:
        return self._identities.delete(uid)
