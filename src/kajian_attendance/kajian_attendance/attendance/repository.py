from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceHistoryRow, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_participant_and_session(self, participant_id: str, session_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        participant_id: str,
        session_id: str,
        check_in_time: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert a check-in row.

        Raises UniqueViolation when the (participant, session) pair already has one.
        """

        raise NotImplementedError

    def history(
        self,
        *,
        participant_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> Sequence[AttendanceHistoryRow]:
        raise NotImplementedError

    def delete_for_participant(self, participant_id: str) -> int:
        raise NotImplementedError

    def delete_for_session(self, session_id: str) -> int:
        raise NotImplementedError

