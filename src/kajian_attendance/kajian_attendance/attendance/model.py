from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Entitas domain: satu kehadiran peserta di satu sesi."""

    attendance_id: str
    participant_id: str
    session_id: str
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceHistoryRow:
    """Read-model joined with participant and session, used by history/export."""

    attendance_id: str
    participant_id: str
    session_id: str
    participant_name: str
    participant_email: str
    participant_phone: Optional[str]
    session_title: str
    session_date: date
    start_time: time
    end_time: time
    location: Optional[str]
    check_in_time: datetime
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    notes: Optional[str] = None
