from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from werkzeug.security import check_password_hash

from src.kajian_attendance.kajian_attendance.core.enums import Role
from src.kajian_attendance.kajian_attendance.core.exceptions import StoreError
from src.kajian_attendance.kajian_attendance.database import tables
from src.kajian_attendance.kajian_attendance.provisioning.service import ProvisioningService


class SimulatedCrash(BaseException):
    """Process dies between two writes; no Python-level cleanup runs."""


@pytest.fixture
def provisioning(container, fake_clock) -> ProvisioningService:
    return ProvisioningService(
        container.participants_repo,
        container.profiles_repo,
        container.invitations_repo,
        container.accounts_repo,
        timeout_seconds=30,
        clock=fake_clock,
    )


@pytest.fixture
def invitation(container):
    now = datetime(2025, 3, 14, 9, 0)
    return container.invitation_service.create(
        current_role=Role.ADMIN,
        created_by="admin-1",
        name="Siti Aminah",
        email="siti@example.com",
        phone="0812000111",
        now=now,
    )


def test_creates_participant_and_linked_profile(provisioning, store):
    result = provisioning.create_participant_profile("acc-12345678-x", "Ahmad@Example.com", "Ahmad", "081234567")

    assert result.success
    assert result.error is None
    assert result.participant.email == "ahmad@example.com"
    assert result.participant.qr_code == "QR_ahmad_example_com_acc-1234"
    assert result.profile.participant_id == result.participant.participant_id
    assert result.profile.role == Role.PARTICIPANT
    assert len(store.rows(tables.PARTICIPANTS)) == 1


def test_profile_failure_rolls_back_participant(provisioning, store):
    store.fail_on[(tables.PROFILES, "upsert")] = StoreError("permission denied for table profiles", table=tables.PROFILES)

    result = provisioning.create_participant_profile("acc-1", "ahmad@example.com", "Ahmad", None)

    assert not result.success
    assert result.data == {}
    assert result.error == "Gagal membuat profil: permission denied for table profiles"
    assert store.rows(tables.PARTICIPANTS) == []
    assert store.rows(tables.PROFILES) == []


def test_timeout_after_profile_restores_previous_profile(provisioning, container, store, fake_clock):
    container.profiles_repo.upsert(profile_id="acc-1", email="ahmad@example.com", role=Role.PARTICIPANT, participant_id=None)
    original_upsert = store.upsert

    def slow_upsert(table, record, conflict_key="id"):
        row = original_upsert(table, record, conflict_key)
        fake_clock.advance(31)
        return row

    store.upsert = slow_upsert
    try:
        result = provisioning.create_participant_profile("acc-1", "ahmad@example.com", "Ahmad", None)
    finally:
        store.upsert = original_upsert

    assert not result.success
    assert store.rows(tables.PARTICIPANTS) == []
    [profile] = store.rows(tables.PROFILES)
    assert profile["participant_id"] is None


def test_participant_failure_writes_nothing(provisioning, store):
    store.fail_on[(tables.PARTICIPANTS, "insert")] = StoreError("duplicate key", table=tables.PARTICIPANTS)

    result = provisioning.create_participant_profile("acc-1", "ahmad@example.com", "Ahmad", None)

    assert not result.success
    assert result.error.startswith("Gagal membuat data peserta")
    assert store.rows(tables.PROFILES) == []


def test_invalid_input_is_reported_not_raised(provisioning, store):
    result = provisioning.create_participant_profile("acc-1", "not-an-email", "Ahmad", None)

    assert not result.success
    assert store.rows(tables.PARTICIPANTS) == []


def test_crash_between_writes_leaves_orphan_participant(provisioning, store):
    original_upsert = store.upsert

    def crash(*_args, **_kwargs):
        raise SimulatedCrash()

    store.upsert = crash
    try:
        with pytest.raises(SimulatedCrash):
            provisioning.create_participant_profile("acc-1", "ahmad@example.com", "Ahmad", None)
    finally:
        store.upsert = original_upsert

    # Known gap: no profile, participant left behind.
    assert len(store.rows(tables.PARTICIPANTS)) == 1
    assert store.rows(tables.PROFILES) == []


def test_admin_profile(provisioning):
    result = provisioning.create_admin_profile("acc-9", "Admin@Example.com")

    assert result.success
    assert result.profile.role == Role.ADMIN
    assert result.profile.participant_id is None


def test_invitation_flow_marks_invitation_used(provisioning, store, invitation):
    result = provisioning.create_participant_from_invitation(
        "acc-1", "siti@example.com", invitation.token, now=datetime(2025, 3, 14, 10, 0)
    )

    assert result.success
    assert result.participant.name == "Siti Aminah"
    assert result.participant.phone == "0812000111"
    assert result.profile.participant_id == result.participant.participant_id
    [row] = store.rows(tables.INVITATIONS)
    assert row["used"] is True


def test_invitation_cannot_be_reused(provisioning, invitation):
    now = datetime(2025, 3, 14, 10, 0)
    provisioning.create_participant_from_invitation("acc-1", "siti@example.com", invitation.token, now=now)

    result = provisioning.create_participant_from_invitation("acc-2", "siti@example.com", invitation.token, now=now)

    assert not result.success
    assert result.error == "Undangan tidak valid atau sudah kedaluwarsa"


def test_expired_invitation_is_rejected(provisioning, store, invitation):
    result = provisioning.create_participant_from_invitation(
        "acc-1", "siti@example.com", invitation.token, now=invitation.expires_at + timedelta(seconds=1)
    )

    assert not result.success
    assert store.rows(tables.PARTICIPANTS) == []


def test_invitation_email_must_match(provisioning, invitation):
    result = provisioning.create_participant_from_invitation(
        "acc-1", "other@example.com", invitation.token, now=datetime(2025, 3, 14, 10, 0)
    )

    assert not result.success


def test_mark_used_failure_rolls_everything_back(provisioning, store, invitation):
    store.fail_on[(tables.INVITATIONS, "update")] = StoreError("update failed", table=tables.INVITATIONS)

    result = provisioning.create_participant_from_invitation(
        "acc-1", "siti@example.com", invitation.token, now=datetime(2025, 3, 14, 10, 0)
    )

    assert not result.success
    assert result.error == "Gagal membuat status undangan: update failed"
    assert store.rows(tables.PARTICIPANTS) == []
    assert store.rows(tables.PROFILES) == []
    [row] = store.rows(tables.INVITATIONS)
    assert row["used"] is False


def test_timeout_stops_further_writes_and_rolls_back(provisioning, store, invitation, fake_clock):
    original_insert = store.insert

    def slow_insert(table, record):
        row = original_insert(table, record)
        if table == tables.PARTICIPANTS:
            fake_clock.advance(31)
        return row

    store.insert = slow_insert
    try:
        result = provisioning.create_participant_from_invitation(
            "acc-1", "siti@example.com", invitation.token, now=datetime(2025, 3, 14, 10, 0)
        )
    finally:
        store.insert = original_insert

    assert not result.success
    assert result.error.startswith("Timeout: Proses terlalu lama")
    assert store.rows(tables.PROFILES) == []
    assert store.rows(tables.PARTICIPANTS) == []
    [row] = store.rows(tables.INVITATIONS)
    assert row["used"] is False


def test_admin_create_participant_creates_account(provisioning, store):
    result = provisioning.admin_create_participant(
        current_role=Role.ADMIN, name="Umar", email="umar@example.com", phone=None
    )

    assert result.success
    [account] = store.rows(tables.ACCOUNTS)
    assert result.get("account_id") == account["id"]
    assert check_password_hash(account["password_hash"], result.get("temporary_password"))
    assert result.participant.qr_code.endswith(account["id"][:8])
    assert result.profile.profile_id == account["id"]


def test_admin_create_participant_rolls_back_account(provisioning, store):
    store.fail_on[(tables.PROFILES, "upsert")] = StoreError("boom", table=tables.PROFILES)

    result = provisioning.admin_create_participant(
        current_role=Role.ADMIN, name="Umar", email="umar@example.com", phone=None
    )

    assert not result.success
    assert store.rows(tables.ACCOUNTS) == []
    assert store.rows(tables.PARTICIPANTS) == []


def test_admin_create_participant_requires_admin(provisioning, store):
    result = provisioning.admin_create_participant(
        current_role=Role.PARTICIPANT, name="Umar", email="umar@example.com", phone=None
    )

    assert not result.success
    assert store.rows(tables.ACCOUNTS) == []
