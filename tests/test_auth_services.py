"""Tests for accounts, passwords and access tokens."""

import pytest
from fastapi import HTTPException

from autosales.config import settings
from autosales.models.auth import Role
from autosales.schemas.auth import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from autosales.services import auth as auth_service
from conftest import TEST_PASSWORD

# =============================================================================
# Password policy
# =============================================================================


@pytest.mark.parametrize(
    "password, missing",
    [
        ("Ab1", "at least 6 characters"),
        ("Abcdefg", "a digit"),
        ("ABCDEF1", "a lowercase letter"),
        ("abcdef1", "an uppercase letter"),
    ],
)
def test_password_policy_rejects_weak_passwords(password, missing):
    """Test each password rule is reported."""
    with pytest.raises(HTTPException) as exc_info:
        auth_service.validate_password_policy(password)
    assert exc_info.value.status_code == 400
    assert missing in exc_info.value.detail


def test_password_policy_accepts_strong_password():
    """Test a compliant password passes."""
    auth_service.validate_password_policy("Secret123")


def test_hash_and_verify_password():
    hashed = auth_service.hash_password("Secret123")
    assert hashed != "Secret123"
    assert auth_service.verify_password("Secret123", hashed)
    assert not auth_service.verify_password("secret123", hashed)
    assert not auth_service.verify_password("Secret123", None)


# =============================================================================
# Roles and users
# =============================================================================


def test_seed_roles_is_idempotent(db_session):
    """Test seeding twice creates each role once."""
    auth_service.seed_roles(db_session)
    assert auth_service.seed_roles(db_session) == 0
    names = {role.name for role in db_session.query(Role).all()}
    assert names == {"admin", "gerente", "vendedor", "asistente", "inventario"}


def test_register_defaults_to_seller_role(db_session, roles):
    """Test registration without a role assigns vendedor."""
    user = auth_service.auth.register(
        db_session,
        RegisterRequest(
            username="mlopez",
            email="mlopez@example.com",
            first_name="Maria",
            last_name="Lopez",
            password="Secret123",
        ),
    )
    assert user.roles == ["vendedor"]
    assert user.is_active is True
    assert user.password_hash != "Secret123"


def test_register_rejects_unknown_role(db_session, roles):
    """Test registration with a role outside the seeded set."""
    with pytest.raises(HTTPException) as exc_info:
        auth_service.auth.register(
            db_session,
            RegisterRequest(
                username="intruder",
                email="intruder@example.com",
                first_name="In",
                last_name="Truder",
                password="Secret123",
                role="superuser",
            ),
        )
    assert exc_info.value.status_code == 400
    assert "Invalid role" in exc_info.value.detail


def test_register_duplicate_username(db_session, make_user):
    """Test usernames are unique regardless of case."""
    make_user("vendedor", username="jperez")
    with pytest.raises(HTTPException) as exc_info:
        auth_service.create_user(
            db_session,
            username="JPerez",
            password="Secret123",
            first_name="Juan",
            last_name="Perez",
            email="other@example.com",
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Username already exists"


def test_register_duplicate_email(db_session, make_user):
    make_user("vendedor", username="first", email="shared@example.com")
    with pytest.raises(HTTPException) as exc_info:
        auth_service.create_user(
            db_session,
            username="second",
            password="Secret123",
            first_name="Second",
            last_name="User",
            email="Shared@example.com",
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Email already registered"


def test_register_weak_password(db_session, roles):
    with pytest.raises(HTTPException) as exc_info:
        auth_service.create_user(
            db_session,
            username="weak",
            password="weak",
            first_name="Weak",
            last_name="Password",
        )
    assert exc_info.value.status_code == 400


# =============================================================================
# Login and tokens
# =============================================================================


def test_login_returns_token_with_roles(db_session, make_user):
    """Test a successful login issues a token carrying the user's roles."""
    user = make_user("gerente", username="manager1")
    result = auth_service.auth.login(
        db_session, LoginRequest(username="manager1", password=TEST_PASSWORD)
    )
    assert result["token_type"] == "bearer"
    assert result["user"].id == user.id
    assert result["expires_in"] == settings.access_token_minutes * 60
    payload = auth_service.decode_access_token(result["access_token"])
    assert payload["sub"] == str(user.id)
    assert payload["username"] == "manager1"
    assert payload["roles"] == ["gerente"]
    assert payload["iss"] == settings.jwt_issuer
    assert payload["aud"] == settings.jwt_audience
    assert user.last_login_at is not None


def test_login_wrong_password(db_session, make_user):
    make_user("vendedor", username="seller1")
    with pytest.raises(HTTPException) as exc_info:
        auth_service.auth.login(db_session, LoginRequest(username="seller1", password="Wrong123"))
    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Invalid username or password"


def test_login_unknown_user(db_session, roles):
    with pytest.raises(HTTPException) as exc_info:
        auth_service.auth.login(db_session, LoginRequest(username="ghost", password=TEST_PASSWORD))
    assert exc_info.value.status_code == 401


def test_login_inactive_user(db_session, make_user):
    """Test deactivated accounts cannot log in."""
    user = make_user("vendedor", username="retired")
    user.is_active = False
    db_session.commit()
    with pytest.raises(HTTPException) as exc_info:
        auth_service.auth.login(db_session, LoginRequest(username="retired", password=TEST_PASSWORD))
    assert exc_info.value.status_code == 401


def test_decode_rejects_tampered_token(seller_user):
    token, _ = auth_service.create_access_token(seller_user)
    with pytest.raises(HTTPException) as exc_info:
        auth_service.decode_access_token(token + "x")
    assert exc_info.value.status_code == 401


# =============================================================================
# Password changes
# =============================================================================


def test_change_password(db_session, seller_user):
    """Test changing the password with the correct current password."""
    auth_service.auth.change_password(
        db_session,
        str(seller_user.id),
        ChangePasswordRequest(
            current_password=TEST_PASSWORD,
            new_password="Changed456",
            confirm_new_password="Changed456",
        ),
    )
    assert auth_service.verify_password("Changed456", seller_user.password_hash)


def test_change_password_wrong_current(db_session, seller_user):
    with pytest.raises(HTTPException) as exc_info:
        auth_service.auth.change_password(
            db_session,
            str(seller_user.id),
            ChangePasswordRequest(
                current_password="NotMine1",
                new_password="Changed456",
                confirm_new_password="Changed456",
            ),
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Current password is incorrect"


def test_change_password_mismatch_is_schema_error():
    """Test the confirmation must match before the service is reached."""
    with pytest.raises(ValueError):
        ChangePasswordRequest(
            current_password=TEST_PASSWORD,
            new_password="Changed456",
            confirm_new_password="Changed789",
        )


def test_reset_password_unknown_user(db_session, roles):
    with pytest.raises(HTTPException) as exc_info:
        auth_service.auth.reset_password(
            db_session,
            "00000000-0000-0000-0000-000000000000",
            ResetPasswordRequest(new_password="Reset1234", confirm_new_password="Reset1234"),
        )
    assert exc_info.value.status_code == 404


def test_reset_password(db_session, seller_user):
    auth_service.auth.reset_password(
        db_session,
        str(seller_user.id),
        ResetPasswordRequest(new_password="Reset1234", confirm_new_password="Reset1234"),
    )
    assert auth_service.verify_password("Reset1234", seller_user.password_hash)


# =============================================================================
# User administration
# =============================================================================


def test_deactivate_user(db_session, admin_user, seller_user):
    auth_service.users.deactivate(db_session, str(seller_user.id), str(admin_user.id))
    assert seller_user.is_active is False


def test_admin_cannot_deactivate_self(db_session, admin_user):
    with pytest.raises(HTTPException) as exc_info:
        auth_service.users.deactivate(db_session, str(admin_user.id), str(admin_user.id))
    assert exc_info.value.status_code == 400


def test_list_users_filters_active(db_session, admin_user, seller_user):
    seller_user.is_active = False
    db_session.commit()
    active = auth_service.users.list(db_session, True, "created_at", "desc", 50, 0)
    assert admin_user in active
    assert seller_user not in active


def test_bootstrap_admin_created_once(db_session, roles, monkeypatch):
    """Test the bootstrap admin is created from settings when missing."""
    from dataclasses import replace

    patched = replace(
        settings,
        bootstrap_admin_username="root",
        bootstrap_admin_password="Bootstrap1",
        bootstrap_admin_email="root@example.com",
    )
    monkeypatch.setattr(auth_service, "settings", patched)
    user = auth_service.ensure_bootstrap_admin(db_session)
    assert user is not None
    assert user.roles == ["admin"]
    assert auth_service.ensure_bootstrap_admin(db_session) is None


def test_bootstrap_admin_skipped_without_settings(db_session, roles):
    assert auth_service.ensure_bootstrap_admin(db_session) is None
