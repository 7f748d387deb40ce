from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


def minutes_late(now: datetime, session_start: datetime) -> int:
    # Whole minutes past the session start, not past the grace threshold.
    return int((now - session_start).total_seconds() // 60)


class LateStrategy(AttendanceStrategy):
    """Late check-in, noted with the minutes past the session start."""

    def decide_checkin(self, *, now: datetime, session_start: datetime, grace_minutes: int) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.LATE,
            note=f"Terlambat {minutes_late(now, session_start)} menit",
        )
