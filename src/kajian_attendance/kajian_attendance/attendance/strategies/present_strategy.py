from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Check-in within the grace period."""

    def decide_checkin(self, *, now: datetime, session_start: datetime, grace_minutes: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
