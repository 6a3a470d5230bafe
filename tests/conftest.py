from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from task_manager.activity.model import ActivityLog
from task_manager.assignments.model import Assignment
from task_manager.container import Repositories, build_services
from task_manager.core.enums import Role
from task_manager.core.exceptions import ConflictError
from task_manager.identity.model import Identity
from task_manager.tasks.model import Task
from task_manager.users.model import User

_BASE_TIME = datetime(2025, 1, 1, 9, 0, 0)


class _Clock:
    """Strictly increasing timestamps so 'newest first' ordering is deterministic."""

    def __init__(self):
        self._ticks = itertools.count()

    def __call__(self) -> datetime:
        return _BASE_TIME + timedelta(minutes=next(self._ticks))


class FakeIdentityRepo:
    def __init__(self):
        self.items: dict[str, Identity] = {}

    def get_by_uid(self, uid):
        return self.items.get(uid)

    def get_by_email(self, email):
        key = (email or "").strip().lower()
        return next((i for i in self.items.values() if i.email.lower() == key), None)

    def create(self, *, uid, email, password_hash):
        if self.get_by_email(email):
            raise ConflictError("An account with this email already exists")
        self.items[uid] = Identity(uid=uid, email=email, password_hash=password_hash)
        return uid

    def delete(self, uid):
        return self.items.pop(uid, None) is not None


class FakeUserRepo:
    def __init__(self, clock):
        self.items: dict[str, User] = {}
        self._clock = clock
        self.fail_delete = False

    def get_by_id(self, uid):
        return self.items.get(uid)

    def get_by_email(self, email):
        key = (email or "").strip().lower()
        return next((u for u in self.items.values() if u.email.lower() == key), None)

    def list_all(self):
        return sorted(self.items.values(), key=lambda u: u.name.lower())

    def list_by_role(self, role):
        return [u for u in self.list_all() if u.role == role]

    def create(self, uid, user):
        return self.bulk_create([(uid, user)])[0]

    def bulk_create(self, items):
        for uid, _ in items:
            if uid in self.items:
                raise ConflictError("duplicate uid")
        for uid, u in items:
            now = self._clock()
            self.items[uid] = User(
                uid=uid,
                email=u.email,
                name=u.name,
                role=u.role or Role.EMPLOYEE,
                department=u.department,
                phone=u.phone,
                created_at=now,
                updated_at=now,
            )
        return [uid for uid, _ in items]

    def update(self, uid, fields):
        if uid not in self.items:
            return False
        fields = dict(fields)
        if "role" in fields:
            fields["role"] = Role(fields["role"])
        self.items[uid] = replace(self.items[uid], **fields, updated_at=self._clock())
        return True

    def delete(self, uid):
        if self.fail_delete:
            raise RuntimeError("profile store unavailable")
        return self.items.pop(uid, None) is not None


class FakeTaskRepo:
    def __init__(self, clock):
        self.items: dict[str, Task] = {}
        self._clock = clock
        self.fail_bulk = False

    def get_by_id(self, task_id):
        return self.items.get(task_id)

    def list_all(self):
        return sorted(self.items.values(), key=lambda t: t.created_at, reverse=True)

    def list_by_assignee(self, *, uid, email):
        return [t for t in self.list_all() if self._matches(t, uid, email)]

    @staticmethod
    def _matches(task, uid, email):
        if uid and task.assigned_to == uid:
            return True
        return bool(email) and (task.assigned_email or "").lower() == email.lower()

    def create(self, task_id, task):
        return self.bulk_create([(task_id, task)])[0]

    def bulk_create(self, items):
        if self.fail_bulk:
            raise RuntimeError("batch write failed")
        for task_id, t in items:
            now = self._clock()
            self.items[task_id] = Task(
                task_id=task_id,
                title=t.title,
                description=t.description,
                status=t.status,
                priority=t.priority,
                assigned_to=t.assigned_to,
                assigned_email=t.assigned_email,
                assigned_name=t.assigned_name,
                start_date=t.start_date,
                end_date=t.end_date,
                actual_status=t.actual_status,
                created_by=t.created_by,
                created_at=now,
                updated_at=now,
            )
        return [task_id for task_id, _ in items]

    def update(self, task_id, fields):
        if task_id not in self.items:
            return False
        self.items[task_id] = replace(self.items[task_id], **fields, updated_at=self._clock())
        return True

    def delete(self, task_id):
        return self.items.pop(task_id, None) is not None

    def delete_for_assignee(self, *, uid, email):
        ids = [t.task_id for t in self.items.values() if self._matches(t, uid, email)]
        for task_id in ids:
            del self.items[task_id]
        return ids


class FakeKpiRepo:
    def __init__(self):
        self.items = {}

    def create_if_absent(self, score):
        if score.score_id in self.items:
            return False
        self.items[score.score_id] = score
        return True

    def get_by_id(self, score_id):
        return self.items.get(score_id)

    def list_for_user(self, user_id):
        return [s for s in self.items.values() if s.user_id == user_id]

    def list_for_email(self, email):
        return [s for s in self.items.values() if (s.user_email or "").lower() == email.lower()]

    def list_all(self):
        return list(self.items.values())


class FakeActivityRepo:
    def __init__(self, clock):
        self.items: list[ActivityLog] = []
        self._clock = clock

    def append(self, *, log_id, action, user_id, task_id, details):
        self.items.append(
            ActivityLog(log_id=log_id, action=action, user_id=user_id, task_id=task_id, details=details, logged_at=self._clock())
        )
        return log_id

    def list_recent(self, limit):
        return sorted(self.items, key=lambda a: a.logged_at, reverse=True)[:limit]


class FakeNotificationRepo:
    def __init__(self, clock):
        self.items = []
        self._clock = clock

    def bulk_append(self, items):
        for n in items:
            self.items.append(replace(n, created_at=self._clock()))
        return [n.notification_id for n in items]

    def list_for_uid(self, uid):
        return [n for n in self.items if n.recipient_uid == uid]

    def list_for_email(self, email):
        return [n for n in self.items if n.recipient_email == email]


class FakeAttendanceRepo:
    def __init__(self):
        self.items = {}

    def upsert_many(self, entries):
        for e in entries:
            self.items[e.entry_id] = e
        return [e.entry_id for e in entries]

    def list_all(self):
        return sorted(self.items.values(), key=lambda e: e.work_date, reverse=True)

    def list_for_user(self, user_id):
        return [e for e in self.list_all() if e.user_id == user_id]


class FakeAssignmentRepo:
    def __init__(self, clock):
        self.items: dict[str, Assignment] = {}
        self._clock = clock

    def create(self, *, assignment_id, employee_id, task_id, progress, note):
        now = self._clock()
        self.items[assignment_id] = Assignment(
            assignment_id=assignment_id,
            employee_id=employee_id,
            task_id=task_id,
            progress=progress,
            note=note,
            created_at=now,
            updated_at=now,
        )
        return assignment_id

    def get_by_id(self, assignment_id):
        return self.items.get(assignment_id)

    def list_for_employee(self, employee_id):
        return [a for a in self.items.values() if a.employee_id == employee_id]

    def update_progress(self, assignment_id, *, progress, note):
        current = self.items.get(assignment_id)
        if not current:
            return False
        changes = {"progress": progress, "updated_at": self._clock()}
        if note is not None:
            changes["note"] = note
        self.items[assignment_id] = replace(current, **changes)
        return True


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 3, 10, 12, 0, 0)


@pytest.fixture
def repos() -> Repositories:
    clock = _Clock()
    return Repositories(
        identities=FakeIdentityRepo(),
        users=FakeUserRepo(clock),
        tasks=FakeTaskRepo(clock),
        kpi=FakeKpiRepo(),
        activity=FakeActivityRepo(clock),
        notifications=FakeNotificationRepo(clock),
        attendance=FakeAttendanceRepo(),
        assignments=FakeAssignmentRepo(clock),
    )


@pytest.fixture
def container(repos):
    return build_services(
        repos,
        secret_key="test-secret",
        default_employee_password="12345678",
        reminder_signature="Regard\nQuality Manager",
    )


@pytest.fixture
def admin(container):
    return container.auth_service.sign_up(email="admin@example.com", password="admin123", name="Ada Admin", role=Role.ADMIN)


@pytest.fixture
def employee(container):
    return container.auth_service.sign_up(email="emp@example.com", password="12345678", name="Eve Employee")


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from task_manager.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers(container, admin):
    return {"Authorization": f"Bearer {container.auth_service.issue_token(admin)}"}


@pytest.fixture
def employee_headers(container, employee):
    return {"Authorization": f"Bearer {container.auth_service.issue_token(employee)}"}
