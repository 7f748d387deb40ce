from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..sessions.model import KajianSession
from .factory import AttendanceStrategyFactory
from .strategies.base import StatusDecision


def derive_status(
    session: KajianSession,
    check_in: datetime,
    grace_minutes: int,
    *,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> StatusDecision:
    """`present` iff check_in <= session start + grace, otherwise `late` with a note."""

    factory = factory or AttendanceStrategyFactory()
    session_start = session.starts_at
    strategy = factory.for_checkin(now=check_in, session_start=session_start, grace_minutes=grace_minutes)
    return strategy.decide_checkin(now=check_in, session_start=session_start, grace_minutes=grace_minutes)
