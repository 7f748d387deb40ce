from __future__ import annotations

import pytest

from src.kajian_attendance.kajian_attendance.core.enums import Role
from src.kajian_attendance.kajian_attendance.core.exceptions import AuthenticationError, ValidationError


def test_sign_up_then_sign_in_resolves_profile(container):
    account = container.auth_service.sign_up("Ahmad@Example.com", "rahasia1")
    container.provisioning_service.create_participant_profile(account.account_id, account.email, "Ahmad", None)

    auth = container.auth_service.sign_in("ahmad@example.com", "rahasia1")

    assert auth.account_id == account.account_id
    assert auth.role == Role.PARTICIPANT
    assert auth.participant_id is not None
    assert not auth.is_admin


def test_duplicate_email_is_rejected(container):
    container.auth_service.sign_up("ahmad@example.com", "rahasia1")

    with pytest.raises(ValidationError, match="Email sudah terdaftar"):
        container.auth_service.sign_up("AHMAD@example.com", "rahasia2")


def test_short_password_is_rejected(container):
    with pytest.raises(ValidationError):
        container.auth_service.sign_up("ahmad@example.com", "123")


@pytest.mark.parametrize("email,password", [("ahmad@example.com", "salah123"), ("nobody@example.com", "rahasia1")])
def test_bad_credentials(container, email, password):
    container.auth_service.sign_up("ahmad@example.com", "rahasia1")

    with pytest.raises(AuthenticationError, match="Email atau password salah"):
        container.auth_service.sign_in(email, password)


def test_context_without_profile_has_no_role(container):
    account = container.auth_service.sign_up("baru@example.com", "rahasia1")

    auth = container.auth_service.load_context(account.account_id)

    assert auth.profile is None
    assert auth.role is None
    assert container.auth_service.load_context("gone") is None


def test_first_admin_needs_no_code(container):
    assert container.auth_service.admin_signup_allowed("", "ADMIN2024")

    container.provisioning_service.create_admin_profile("acc-1", "admin@example.com")

    assert not container.auth_service.admin_signup_allowed("wrong", "ADMIN2024")
    assert container.auth_service.admin_signup_allowed("ADMIN2024", "ADMIN2024")
