from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..auth.repository import AccountRepository
from ..common.validators import normalize_email, optional_phone, optional_text, require_non_empty
from ..core.constants import DEFAULT_BLACKLIST_REASON
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..profiles.repository import ProfileRepository
from .model import Participant, ParticipantStats
from .qr import derive_qr_token
from .repository import ParticipantRepository

logger = logging.getLogger(__name__)


class ParticipantService:
    """Use case: admin roster management (blacklist, delete with cascade)."""

    def __init__(
        self,
        participants: ParticipantRepository,
        attendance: AttendanceRepository,
        profiles: ProfileRepository,
        accounts: Optional[AccountRepository] = None,
    ):
        self._participants = participants
        self._attendance = attendance
        self._profiles = profiles
        self._accounts = accounts

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

    def get(self, participant_id: str) -> Participant:
        participant = self._participants.get_by_id(participant_id)
        if not participant:
            raise NotFoundError("Peserta tidak ditemukan")
        return participant

    def get_by_qr(self, qr_token: str) -> Participant:
        participant = self._participants.get_by_qr((qr_token or "").strip())
        if not participant:
            raise NotFoundError("QR Code tidak ditemukan dalam database.")
        return participant

    def list_all(self, *, search: str = "") -> Sequence[Participant]:
        items = self._participants.list_all()
        term = (search or "").strip().lower()
        if not term:
            return items
        return [
            p
            for p in items
            if term in p.name.lower() or term in p.email.lower() or term in (p.phone or "").lower()
        ]

    def stats(self) -> ParticipantStats:
        items = self._participants.list_all()
        blacklisted = sum(1 for p in items if p.is_blacklisted)
        return ParticipantStats(total=len(items), active=len(items) - blacklisted, blacklisted=blacklisted)

    def create(self, *, current_role: Role, name: str, email: str, phone: Optional[str] = None) -> Participant:
        """Roster entry without an account; the QR token uses the generated id."""

        self._require_admin(current_role)
        name = require_non_empty(name, "Nama")
        email = normalize_email(email)
        if self._participants.get_by_email(email):
            raise ValidationError("Email peserta sudah terdaftar")

        participant_id = str(uuid.uuid4())
        participant = self._participants.create(
            name=name,
            email=email,
            phone=optional_phone(phone),
            qr_code=derive_qr_token(email, participant_id),
            participant_id=participant_id,
        )
        logger.info("Participant created id=%s email=%s", participant.participant_id, email)
        return participant

    def update(self, *, participant_id: str, name: str, phone: Optional[str]) -> Participant:
        name = require_non_empty(name, "Nama")
        self.get(participant_id)
        updated = self._participants.update(
            participant_id,
            name=name,
            phone=optional_phone(phone),
            updated_at=datetime.now(),
        )
        if not updated:
            raise ValidationError("Gagal mengupdate peserta")
        logger.info("Participant updated id=%s", participant_id)
        return updated

    def set_blacklist(
        self,
        *,
        current_role: Role,
        participant_id: str,
        blacklisted: bool,
        reason: Optional[str] = None,
    ) -> Participant:
        self._require_admin(current_role)
        self.get(participant_id)

        reason = (optional_text(reason) or DEFAULT_BLACKLIST_REASON) if blacklisted else None
        updated = self._participants.update(
            participant_id,
            is_blacklisted=bool(blacklisted),
            blacklist_reason=reason,
            updated_at=datetime.now(),
        )
        if not updated:
            raise ValidationError("Gagal mengupdate peserta")
        logger.info("Participant id=%s blacklisted=%s reason=%r", participant_id, updated.is_blacklisted, reason)
        return updated

    def delete(self, *, current_role: Role, participant_id: str) -> None:
        """Delete attendance rows, the linked profile (and account), then the participant."""

        self._require_admin(current_role)
        self.get(participant_id)

        profile = self._profiles.get_by_participant(participant_id)
        if profile and profile.role == Role.ADMIN:
            raise ValidationError("Tidak dapat menghapus akun admin")

        removed_attendance = self._attendance.delete_for_participant(participant_id)

        if profile:
            self._profiles.delete(profile.profile_id)
            if self._accounts:
                self._accounts.delete(profile.profile_id)

        if not self._participants.delete(participant_id):
            raise ValidationError("Gagal menghapus peserta")

        logger.info(
            "Participant deleted id=%s attendance_removed=%d profile=%s",
            participant_id,
            removed_attendance,
            profile.profile_id if profile else None,
        )
