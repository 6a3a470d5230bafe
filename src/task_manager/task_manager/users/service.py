from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..common.validators import require_email, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..events.bus import USERS_TOPIC, ChangeEvent, EventBus
from ..identity.service import AuthService
from ..tasks.service import TaskService
from .model import NewUser, User
from .repository import UserRepository

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = ("name", "department", "phone", "role")


def parse_role(value) -> Role:
    if isinstance(value, Role):
        return value
    text = str(value or "").strip().lower()
    if not text:
        return Role.EMPLOYEE
    try:
        return Role(text)
    except ValueError:
        raise ValidationError("Role must be admin or employee")


@dataclass(frozen=True)
class CascadeError:
    type: str
    message: str

    def to_dict(self) -> dict:
        return {"type": self.type, "message": self.message}


@dataclass(frozen=True)
class CascadeResult:
    uid: Optional[str]
    errors: List[CascadeError] = field(default_factory=list)
    deleted_tasks: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict:
        return {"ok": self.ok, "errors": [e.to_dict() for e in self.errors]}


class UserService:
    """Use case: manage user profiles (admin) including account removal."""

    def __init__(
        self,
        users: UserRepository,
        auth: AuthService,
        tasks: TaskService,
        *,
        default_password: str,
        bus: Optional[EventBus] = None,
    ):
        self._users = users
        self._auth = auth
        self._tasks = tasks
        self._default_password = default_password
        self._bus = bus

    def _publish(self, event: ChangeEvent) -> None:
        if self._bus:
            self._bus.publish(USERS_TOPIC, event)

    def create_user(
        self,
        *,
        email: str,
        name: str,
        role=Role.EMPLOYEE,
        department: Optional[str] = None,
        phone: Optional[str] = None,
        password: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> str:
        email = require_email(email)
        name = require_non_empty(name, "Name")
        profile = NewUser(email=email, name=name, role=parse_role(role), department=department, phone=phone)

        uid = self._auth.create_identity(email, password or self._default_password)
        try:
            self._users.create(uid, profile)
        except Exception:
            logger.exception("Profile creation failed for uid=%s, removing identity", uid)
            self._auth.delete_identity(uid)
            raise

        self._publish(
            ChangeEvent.upsert(uid, self._users.get_by_id(uid), actor_id=actor_id, action="User Created", message=f'User "{email}" created')
        )
        return uid

    def get_user(self, uid: str) -> User:
        user = self._users.get_by_id(uid)
        if not user:
            raise NotFoundError("User not found")
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self._users.get_by_email((email or "").strip())

    def list_users(self) -> Sequence[User]:
        return self._users.list_all()

    def list_by_role(self, role) -> Sequence[User]:
        return self._users.list_by_role(parse_role(role))

    def list_employees(self) -> Sequence[User]:
        return self._users.list_by_role(Role.EMPLOYEE)

    def update_profile(self, uid: str, changes: dict, *, actor_id: Optional[str] = None) -> User:
        self.get_user(uid)
        fields = {k: changes[k] for k in _PROFILE_FIELDS if k in changes}
        if "name" in fields:
            fields["name"] = require_non_empty(fields["name"], "Name")
        if "role" in fields:
            fields["role"] = parse_role(fields["role"]).value
        if fields:
            self._users.update(uid, fields)

        user = self.get_user(uid)
        self._publish(ChangeEvent.upsert(uid, user, actor_id=actor_id, action="User Updated", message="User updated"))
        return user

    def bulk_create(self, profiles: Sequence[NewUser], *, actor_id: Optional[str] = None) -> List[str]:
        """Create identities one by one, then write all profiles in one batch.

        If the batch fails, the identities created for it are removed again.
        """
        created: list[tuple[str, NewUser]] = []
        try:
            for profile in profiles:
                uid = self._auth.create_identity(profile.email, self._default_password)
                created.append((uid, profile))
            self._users.bulk_create(created)
        except Exception:
            logger.exception("Bulk user creation failed, rolling back %d identities", len(created))
            for uid, _ in created:
                self._auth.delete_identity(uid)
            raise

        for uid, profile in created:
            self._publish(
                ChangeEvent.upsert(
                    uid,
                    self._users.get_by_id(uid),
                    actor_id=actor_id,
                    action="User Created",
                    message=f'User "{profile.email}" created',
                )
            )
        return [uid for uid, _ in created]

    def delete_user_cascade(
        self,
        *,
        uid: Optional[str] = None,
        email: Optional[str] = None,
        actor_id: Optional[str] = None,
    ) -> CascadeResult:
        """Remove identity, profile and assigned tasks.

        Each step runs even if an earlier one failed; failures are collected
        as ``authDelete`` / ``userDoc`` / ``tasks`` errors.
        """
        uid = (uid or "").strip() or None
        email = (email or "").strip() or None
        if not uid and not email:
            raise ValidationError("uid or email required")

        target_uid = uid
        if not target_uid:
            try:
                target_uid = self._auth.find_uid_by_email(email)
            except Exception:
                logger.warning("Identity lookup by email failed for %s", email, exc_info=True)

        profile = self._users.get_by_id(target_uid) if target_uid else None
        if profile and profile.role == Role.ADMIN:
            raise AuthorizationError("Admin accounts cannot be deleted")
        if profile and not email:
            email = profile.email

        errors: list[CascadeError] = []
        if target_uid:
            try:
                if not self._auth.delete_identity(target_uid):
                    errors.append(CascadeError("authDelete", f"No identity found for uid {target_uid}"))
            except Exception as e:
                logger.warning("Identity delete failed for uid=%s", target_uid, exc_info=True)
                errors.append(CascadeError("authDelete", str(e) or type(e).__name__))

            try:
                if self._users.delete(target_uid):
                    self._publish(
                        ChangeEvent.delete(target_uid, actor_id=actor_id, action="User Deleted", message="User deleted")
                    )
            except Exception as e:
                logger.warning("Profile delete failed for uid=%s", target_uid, exc_info=True)
                errors.append(CascadeError("userDoc", str(e) or type(e).__name__))

        deleted: list[str] = []
        try:
            deleted = self._tasks.delete_for_assignee(uid=target_uid, email=email, actor_id=actor_id)
        except Exception as e:
            logger.warning("Task cleanup failed for uid=%s email=%s", target_uid, email, exc_info=True)
            errors.append(CascadeError("tasks", str(e) or type(e).__name__))

        return CascadeResult(uid=target_uid, errors=errors, deleted_tasks=len(deleted))

    def email_in_use(self, email: str) -> bool:
        return bool(self._auth.find_uid_by_email(email) or self._users.get_by_email(email))
