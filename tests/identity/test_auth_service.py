import pytest

from task_manager.core.enums import Role
from task_manager.core.exceptions import AuthenticationError, AuthorizationError, ConflictError, ValidationError
from task_manager.identity.session import SessionManager
from task_manager.identity.tokens import TokenService, bearer_token


def test_sign_up_creates_identity_and_profile(container, repos):
    user = container.auth_service.sign_up(email="new@example.com", password="secret1", name="New")
    assert user.role == Role.EMPLOYEE
    assert repos.identities.get_by_uid(user.uid).password_hash != "secret1"
    assert repos.users.get_by_id(user.uid).name == "New"


def test_sign_up_validates_input(container, employee):
    with pytest.raises(ValidationError):
        container.auth_service.sign_up(email="not-an-email", password="secret1", name="X")
    with pytest.raises(ValidationError):
        container.auth_service.sign_up(email="x@example.com", password="123", name="X")
    with pytest.raises(ConflictError):
        container.auth_service.sign_up(email="emp@example.com", password="secret1", name="X")


def test_sign_in(container, employee):
    user = container.auth_service.sign_in(" emp@example.com ", "12345678")
    assert user.uid == employee.uid
    assert user.name == "Eve Employee"

    with pytest.raises(AuthenticationError) as exc:
        container.auth_service.sign_in("emp@example.com", "wrong-password")
    assert str(exc.value) == "Invalid email or password"
    with pytest.raises(AuthenticationError):
        container.auth_service.sign_in("nobody@example.com", "12345678")


def test_token_round_trip_and_admin_check(container, admin, employee):
    auth = container.auth_service
    admin_claims = auth.verify_admin(auth.issue_token(admin))
    assert admin_claims.uid == admin.uid

    employee_token = auth.issue_token(employee)
    assert auth.verify_token(employee_token).email == "emp@example.com"
    with pytest.raises(AuthorizationError):
        auth.verify_admin(employee_token)


def test_admin_check_falls_back_to_profile_role(container, employee):
    token = container.auth_service.issue_token(employee)
    container.user_service.update_profile(employee.uid, {"role": "admin"})
    assert container.auth_service.verify_admin(token).uid == employee.uid


def test_token_for_deleted_account_is_rejected(container, employee):
    token = container.auth_service.issue_token(employee)
    container.user_service.delete_user_cascade(uid=employee.uid)
    with pytest.raises(AuthenticationError):
        container.auth_service.verify_token(token)


def test_token_service_rejects_tampered_and_expired_tokens():
    tokens = TokenService("secret")
    token = tokens.issue(uid="u1", email="a@example.com", role=Role.EMPLOYEE)

    with pytest.raises(AuthenticationError):
        TokenService("other-secret").verify(token)
    with pytest.raises(AuthenticationError):
        TokenService("secret", max_age_seconds=-1).verify(token)
    with pytest.raises(AuthenticationError):
        tokens.verify(None)


def test_bearer_token_header():
    assert bearer_token("Bearer abc") == "abc"
    assert bearer_token("Basic abc") is None
    assert bearer_token("Bearer ") is None
    assert bearer_token(None) is None


def test_session_manager_lifecycle(container, employee):
    store = {}
    sessions = SessionManager(store)
    assert sessions.current() is None

    sessions.start(employee)
    current = sessions.current()
    assert current.uid == employee.uid
    assert current.role == Role.EMPLOYEE
    assert not current.is_admin

    sessions.end()
    assert store == {}
    assert sessions.current() is None


def test_session_manager_ignores_corrupt_data():
    sessions = SessionManager({"auth": {"uid": "u1", "role": "superuser"}})
    assert sessions.current() is None


def test_demoted_admin_token_loses_admin_access(container, admin):
    token = container.auth_service.issue_token(admin)
    container.user_service.update_profile(admin.uid, {"role": "employee"})
    with pytest.raises(AuthorizationError):
        container.auth_service.verify_admin(token)
    assert container.auth_service.verify_token(token).uid == admin.uid
