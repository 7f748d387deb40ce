from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, CheckInResult
from ..core.exceptions import NotFoundError, UniqueViolation
from ..participants.model import Participant
from ..participants.repository import ParticipantRepository
from ..profiles.model import Profile
from ..sessions.model import KajianSession
from ..sessions.repository import SessionRepository
from ..settings.store import SettingsStore
from .factory import AttendanceStrategyFactory
from .history_filter import filter_records
from .model import AttendanceHistoryRow, AttendanceRecord
from .report import (
    AttendanceSummary,
    DashboardCounts,
    SessionAttendanceView,
    dashboard_counts,
    session_statuses,
    summarize,
)
from .repository import AttendanceRepository
from .status import derive_status

logger = logging.getLogger(__name__)

MSG_PROFILE_NOT_LINKED = "Profil participant tidak ditemukan"
MSG_SESSION_UNAVAILABLE = "Session tidak ditemukan atau tidak aktif"
MSG_ALREADY_SELF = "Anda sudah check-in untuk session ini"
MSG_ALREADY_ADMIN = "Peserta sudah melakukan check-in untuk session ini."
MSG_UNKNOWN_QR = "QR Code tidak ditemukan dalam database."


@dataclass(frozen=True)
class CheckInOutcome:
    result: CheckInResult
    message: str
    record: Optional[AttendanceRecord] = None
    session: Optional[KajianSession] = None
    participant: Optional[Participant] = None

    @property
    def checked_in(self) -> bool:
        return self.result == CheckInResult.CHECKED_IN


class AttendanceService:
    """Check-in use cases plus history/report read models."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        sessions: SessionRepository,
        participants: ParticipantRepository,
        settings: SettingsStore,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._participants = participants
        self._settings = settings
        self._factory = strategy_factory or AttendanceStrategyFactory()

    def _record(
        self,
        *,
        participant_id: str,
        session: KajianSession,
        now: datetime,
        already_message: str,
    ) -> CheckInOutcome:
        existing = self._attendance.get_for_participant_and_session(participant_id, session.session_id)
        if existing:
            logger.info("Duplicate check-in participant=%s session=%s", participant_id, session.session_id)
            return CheckInOutcome(CheckInResult.ALREADY_CHECKED_IN, already_message, record=existing, session=session)

        # Grace period is read at the moment of check-in.
        grace = self._settings.get_late_threshold_minutes()
        decision = derive_status(session, now, grace, factory=self._factory)

        try:
            record = self._attendance.create_checkin(
                participant_id=participant_id,
                session_id=session.session_id,
                check_in_time=now,
                status=decision.status,
                notes=decision.note,
            )
        except UniqueViolation:
            # Lost the race against a concurrent check-in for the same pair.
            logger.info("Check-in race resolved by unique key participant=%s session=%s", participant_id, session.session_id)
            existing = self._attendance.get_for_participant_and_session(participant_id, session.session_id)
            return CheckInOutcome(CheckInResult.ALREADY_CHECKED_IN, already_message, record=existing, session=session)

        logger.info(
            "Check-in recorded participant=%s session=%s status=%s grace=%d",
            participant_id,
            session.session_id,
            record.status.value,
            grace,
        )
        label = "tepat waktu" if record.status == AttendanceStatus.PRESENT else "terlambat"
        return CheckInOutcome(
            CheckInResult.CHECKED_IN,
            f'Berhasil check-in {label} untuk "{session.title}"',
            record=record,
            session=session,
        )

    def self_check_in(self, profile: Optional[Profile], session_id: str, *, now: datetime | None = None) -> CheckInOutcome:
        """Participant scans a session QR. No blacklist check on this path."""

        now = now or now_local()
        if not profile or not profile.participant_id:
            logger.warning("Self check-in without linked participant profile=%s", getattr(profile, "profile_id", None))
            return CheckInOutcome(CheckInResult.PROFILE_NOT_LINKED, MSG_PROFILE_NOT_LINKED)

        session = self._sessions.get_active(session_id)
        if not session:
            return CheckInOutcome(CheckInResult.SESSION_UNAVAILABLE, MSG_SESSION_UNAVAILABLE)

        return self._record(
            participant_id=profile.participant_id,
            session=session,
            now=now,
            already_message=MSG_ALREADY_SELF,
        )

    def lookup_qr(self, qr_token: str) -> Participant:
        participant = self._participants.get_by_qr(qr_token.strip())
        if not participant:
            raise NotFoundError(MSG_UNKNOWN_QR)
        return participant

    def admin_check_in(self, qr_token: str, session_id: str, *, now: datetime | None = None) -> CheckInOutcome:
        """Admin scans a participant QR for the selected session; blacklist enforced."""

        now = now or now_local()
        participant = self._participants.get_by_qr((qr_token or "").strip())
        if not participant:
            return CheckInOutcome(CheckInResult.UNKNOWN_QR, MSG_UNKNOWN_QR)

        if participant.is_blacklisted:
            logger.info("Blocked blacklisted participant=%s", participant.participant_id)
            return CheckInOutcome(
                CheckInResult.BLACKLISTED,
                f"{participant.name} tidak dapat melakukan check-in. Alasan: {participant.blacklist_reason or '-'}",
                participant=participant,
            )

        session = self._sessions.get_active(session_id)
        if not session:
            return CheckInOutcome(CheckInResult.SESSION_UNAVAILABLE, MSG_SESSION_UNAVAILABLE, participant=participant)

        outcome = self._record(
            participant_id=participant.participant_id,
            session=session,
            now=now,
            already_message=MSG_ALREADY_ADMIN,
        )
        message = outcome.message
        if outcome.checked_in:
            message = f"{participant.name} berhasil check-in ke session."
        return CheckInOutcome(outcome.result, message, record=outcome.record, session=session, participant=participant)

    def history(
        self,
        *,
        participant_id: Optional[str] = None,
        search: str = "",
        month: str = "",
    ) -> list[AttendanceHistoryRow]:
        rows = self._attendance.history(participant_id=participant_id)
        return filter_records(rows, search, month)

    def summary(self, records: Sequence[AttendanceHistoryRow]) -> AttendanceSummary:
        sessions = self._sessions.list_all()
        return summarize(records, [s.session_id for s in sessions])

    def participant_report(self, participant_id: str) -> list[SessionAttendanceView]:
        records = self._attendance.history(participant_id=participant_id)
        return session_statuses(self._sessions.list_all(), records)

    def session_attendance(self, session_id: str) -> Sequence[AttendanceHistoryRow]:
        """Joined check-ins for one session, newest first (admin monitor)."""

        return self._attendance.history(session_id=session_id)

    def dashboard(self, *, today: Optional[date] = None) -> DashboardCounts:
        participants = self._participants.list_all()
        return dashboard_counts(
            self._sessions.list_all(),
            [p.is_blacklisted for p in participants],
            self._attendance.history(),
            today or now_local().date(),
        )
