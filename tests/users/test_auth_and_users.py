from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.class_attendance.class_attendance.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.class_attendance.class_attendance.users.tokens import TokenService

SECRET = "unit-test-secret-0123456789abcdef0123456789"


def test_authenticate_success(container):
    user = container.auth_service.authenticate("Admin@PGP.com ", "password123")

    assert user.user_id == 1
    assert user.role == "admin"
    assert user.to_dict() == {"id": 1, "name": "Admin User", "email": "admin@pgp.com", "role": "admin"}


@pytest.mark.parametrize(
    "email, password",
    [
        ("admin@pgp.com", "wrong-password"),
        ("nobody@pgp.com", "password123"),
    ],
)
def test_authenticate_invalid_credentials(container, email, password):
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        container.auth_service.authenticate(email, password)


@pytest.mark.parametrize("email, password", [("", "password123"), ("admin@pgp.com", ""), (None, None)])
def test_authenticate_requires_both_fields(container, email, password):
    with pytest.raises(ValidationError, match="Email and password required"):
        container.auth_service.authenticate(email, password)


def test_register_creates_teacher(container, repos):
    user = container.auth_service.register(staff_id="TCH009", name="New Teacher", email="New@PGP.com", password="secret1")

    assert user.role == "teacher"
    assert user.email == "new@pgp.com"
    assert repos.users.get_by_staff_id("TCH009").role == "teacher"
    assert container.auth_service.authenticate("new@pgp.com", "secret1").user_id == user.user_id


def test_register_rejects_duplicates_and_short_password(container):
    svc = container.auth_service
    with pytest.raises(ValidationError, match="Email already registered"):
        svc.register(staff_id="TCH009", name="X", email="teacher@pgp.com", password="secret1")
    with pytest.raises(ValidationError, match="Staff ID already registered"):
        svc.register(staff_id="TCH001", name="X", email="x@pgp.com", password="secret1")
    with pytest.raises(ValidationError, match="at least 6"):
        svc.register(staff_id="TCH010", name="X", email="y@pgp.com", password="123")


# ---- tokens ----


def test_token_round_trip_carries_identity():
    tokens = TokenService(SECRET, expiry_hours=1)

    caller = tokens.decode(tokens.issue(user_id=5, role="hod", name="Head"))

    assert (caller.user_id, caller.role, caller.name) == (5, "hod", "Head")
    assert tokens.expiry_seconds == 3600


def test_expired_token_is_rejected():
    tokens = TokenService(SECRET, expiry_hours=1)
    token = tokens.issue(user_id=5, role="hod", now=datetime.now(timezone.utc) - timedelta(hours=2))

    with pytest.raises(AuthenticationError, match="expired"):
        tokens.decode(token)


@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
def test_missing_or_garbled_token_is_rejected(token):
    with pytest.raises(AuthenticationError):
        TokenService(SECRET).decode(token)


def test_token_signed_with_other_secret_is_rejected():
    token = TokenService("another-secret-0123456789abcdef01234567").issue(user_id=1, role="admin")

    with pytest.raises(AuthenticationError, match="Invalid token"):
        TokenService(SECRET).decode(token)


def test_token_without_role_is_rejected():
    token = jwt.encode({"id": 1}, SECRET, algorithm="HS256")

    with pytest.raises(AuthenticationError, match="Invalid token"):
        TokenService(SECRET).decode(token)


# ---- user administration ----


def test_user_admin_requires_admin_role(container, teacher):
    with pytest.raises(AuthorizationError):
        container.user_service.list_users(teacher)
    with pytest.raises(AuthorizationError):
        container.user_service.stats(teacher)


def test_admin_creates_updates_and_deletes_user(container, repos, admin):
    svc = container.user_service

    created = svc.create_user(admin, name="Priya", email="priya@pgp.com", password="secret1", role="HOD", staff_id="HOD01")
    assert created.role == "hod"

    updated = svc.update_user(admin, created.user_id, name="Priya S", role="principal")
    assert (updated.name, updated.role, updated.email) == ("Priya S", "principal", "priya@pgp.com")

    svc.delete_user(admin, created.user_id)
    with pytest.raises(NotFoundError):
        svc.get_user(admin, created.user_id)


def test_create_user_rejects_unknown_role(container, admin):
    with pytest.raises(ValidationError, match="Invalid role"):
        container.user_service.create_user(admin, name="X", email="x@pgp.com", password="secret1", role="janitor")


def test_update_user_password_change_allows_login(container, admin):
    container.user_service.update_user(admin, 2, password="newpass1")

    assert container.auth_service.authenticate("teacher@pgp.com", "newpass1").user_id == 2


def test_admin_cannot_delete_self(container, admin):
    with pytest.raises(ValidationError, match="own account"):
        container.user_service.delete_user(admin, 1)


def test_user_stats(container, admin):
    assert container.user_service.stats(admin) == {
        "total": 2,
        "admins": 1,
        "teachers": 1,
        "byRole": {"admin": 1, "teacher": 1},
    }
