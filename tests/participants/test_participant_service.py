from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.kajian_attendance.kajian_attendance.core.constants import DEFAULT_BLACKLIST_REASON
from src.kajian_attendance.kajian_attendance.core.enums import Role
from src.kajian_attendance.kajian_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.kajian_attendance.kajian_attendance.database import tables
from src.kajian_attendance.kajian_attendance.participants.qr import derive_qr_token, render_qr_png


def test_qr_token_replaces_first_at_and_first_dot_only():
    assert derive_qr_token("a.b@mail.example.com", "0123456789abcdef") == "QR_a_b_mail.example.com_01234567"


def test_qr_png_is_png():
    buf = render_qr_png("QR_ahmad_example_com_12345678")

    assert buf.read(8) == b"\x89PNG\r\n\x1a\n"


def test_delete_cascades_attendance_profile_and_account(container, store, participant):
    for day in (7, 14, 21):
        s = container.sessions_repo.create(
            title=f"Kajian {day}", date=date(2025, 3, day), start_time=time(19, 0), end_time=time(21, 0)
        )
        container.attendance_service.admin_check_in(participant.qr_code, s.session_id, now=datetime(2025, 3, day, 19, 0))
    account = container.accounts_repo.create(email=participant.email, password_hash="x")
    container.profiles_repo.upsert(
        profile_id=account.account_id, email=participant.email, role=Role.PARTICIPANT, participant_id=participant.participant_id
    )
    assert len(store.rows(tables.ATTENDANCE)) == 3

    container.participant_service.delete(current_role=Role.ADMIN, participant_id=participant.participant_id)

    assert store.rows(tables.ATTENDANCE) == []
    assert store.rows(tables.PROFILES) == []
    assert store.rows(tables.ACCOUNTS) == []
    assert store.rows(tables.PARTICIPANTS) == []


def test_delete_requires_admin(container, participant):
    with pytest.raises(AuthorizationError):
        container.participant_service.delete(current_role=Role.PARTICIPANT, participant_id=participant.participant_id)


def test_delete_refuses_admin_profile(container, store, participant, kajian_session):
    container.attendance_service.admin_check_in(
        participant.qr_code, kajian_session.session_id, now=datetime(2025, 3, 14, 19, 0)
    )
    container.profiles_repo.upsert(
        profile_id="admin-1", email=participant.email, role=Role.ADMIN, participant_id=participant.participant_id
    )

    with pytest.raises(ValidationError):
        container.participant_service.delete(current_role=Role.ADMIN, participant_id=participant.participant_id)

    assert len(store.rows(tables.PROFILES)) == 1
    assert len(store.rows(tables.ATTENDANCE)) == 1
    assert len(store.rows(tables.PARTICIPANTS)) == 1


def test_delete_unknown_participant(container):
    with pytest.raises(NotFoundError):
        container.participant_service.delete(current_role=Role.ADMIN, participant_id="missing")


def test_blacklist_uses_default_reason_and_unblacklist_clears_it(container, participant):
    blocked = container.participant_service.set_blacklist(
        current_role=Role.ADMIN, participant_id=participant.participant_id, blacklisted=True
    )
    assert blocked.is_blacklisted
    assert blocked.blacklist_reason == DEFAULT_BLACKLIST_REASON

    cleared = container.participant_service.set_blacklist(
        current_role=Role.ADMIN, participant_id=participant.participant_id, blacklisted=False, reason="ignored"
    )
    assert not cleared.is_blacklisted
    assert cleared.blacklist_reason is None


def test_stats_and_search(container, participant):
    other = container.participant_service.create(current_role=Role.ADMIN, name="Budi", email="budi@example.com")
    container.participant_service.set_blacklist(
        current_role=Role.ADMIN, participant_id=other.participant_id, blacklisted=True, reason="Spam"
    )

    stats = container.participant_service.stats()

    assert (stats.total, stats.active, stats.blacklisted) == (2, 1, 1)
    assert [p.name for p in container.participant_service.list_all(search="BUDI")] == ["Budi"]


def test_create_derives_qr_from_generated_id(container):
    created = container.participant_service.create(current_role=Role.ADMIN, name="Budi", email="Budi@Example.com")

    assert created.email == "budi@example.com"
    assert created.qr_code == derive_qr_token("budi@example.com", created.participant_id)
    assert container.participant_service.get_by_qr(created.qr_code) == created


def test_create_rejects_duplicate_email(container, participant):
    with pytest.raises(ValidationError):
        container.participant_service.create(current_role=Role.ADMIN, name="Lagi", email=participant.email)


def test_update_name_and_phone(container, participant):
    updated = container.participant_service.update(
        participant_id=participant.participant_id, name="Ahmad F.", phone="  "
    )

    assert updated.name == "Ahmad F."
    assert updated.phone is None


def test_update_requires_name(container, participant):
    with pytest.raises(ValidationError):
        container.participant_service.update(participant_id=participant.participant_id, name=" ", phone=None)
