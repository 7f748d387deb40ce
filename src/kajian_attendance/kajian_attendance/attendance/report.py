from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from ..core.enums import AttendanceStatus, ReportStatus
from ..sessions.model import KajianSession
from .model import AttendanceHistoryRow


@dataclass(frozen=True)
class SessionAttendanceView:
    session_id: str
    title: str
    date: str
    status: ReportStatus


@dataclass(frozen=True)
class AttendanceSummary:
    total_records: int
    total_sessions: int
    attended_sessions: int
    present: int
    late: int
    absent: int


def summarize(records: Sequence[AttendanceHistoryRow], scheduled_session_ids: Iterable[str]) -> AttendanceSummary:
    """Count statistics; `absent` is scheduled minus attended, never a stored row."""

    scheduled = set(scheduled_session_ids)
    attended = {r.session_id for r in records}
    return AttendanceSummary(
        total_records=len(records),
        total_sessions=len(scheduled),
        attended_sessions=len(attended),
        present=sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
        late=sum(1 for r in records if r.status == AttendanceStatus.LATE),
        absent=len(scheduled - attended),
    )


def session_statuses(
    sessions: Iterable[KajianSession],
    records: Iterable[AttendanceHistoryRow],
) -> list[SessionAttendanceView]:
    """Per-session view for one participant's records."""

    by_session = {r.session_id: r.status for r in records}
    out: list[SessionAttendanceView] = []
    for s in sessions:
        stored = by_session.get(s.session_id)
        out.append(
            SessionAttendanceView(
                session_id=s.session_id,
                title=s.title,
                date=s.date.isoformat(),
                status=ReportStatus.from_stored(stored) if stored else ReportStatus.ABSENT,
            )
        )
    return out


@dataclass(frozen=True)
class DashboardCounts:
    total_sessions: int
    active_sessions: int
    total_participants: int
    blacklisted: int
    today_attendance: int
    recent_sessions: tuple[KajianSession, ...] = ()


def dashboard_counts(
    sessions: Sequence[KajianSession],
    blacklist_flags: Sequence[bool],
    records: Iterable[AttendanceHistoryRow],
    today: date,
    *,
    recent: int = 5,
) -> DashboardCounts:
    """Admin landing numbers; `today_attendance` counts check-ins on `today`."""

    newest_first = sorted(sessions, key=lambda s: (s.date, s.start_time), reverse=True)
    return DashboardCounts(
        total_sessions=len(sessions),
        active_sessions=sum(1 for s in sessions if s.is_active),
        total_participants=len(blacklist_flags),
        blacklisted=sum(1 for flag in blacklist_flags if flag),
        today_attendance=sum(1 for r in records if r.check_in_time.date() == today),
        recent_sessions=tuple(newest_first[:recent]),
    )
