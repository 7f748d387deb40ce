from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, session_start: datetime, grace_minutes: int) -> AttendanceStrategy:
        if now <= session_start + timedelta(minutes=grace_minutes):
            return PresentStrategy()
        return LateStrategy()
