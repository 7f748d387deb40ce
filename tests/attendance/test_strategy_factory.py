from datetime import date, datetime, time

from src.kajian_attendance.kajian_attendance.attendance.factory import AttendanceStrategyFactory
from src.kajian_attendance.kajian_attendance.attendance.status import derive_status
from src.kajian_attendance.kajian_attendance.attendance.strategies.late_strategy import LateStrategy, minutes_late
from src.kajian_attendance.kajian_attendance.attendance.strategies.present_strategy import PresentStrategy
from src.kajian_attendance.kajian_attendance.core.enums import AttendanceStatus
from src.kajian_attendance.kajian_attendance.sessions.model import KajianSession


def _session(start=time(19, 0)) -> KajianSession:
    return KajianSession(
        session_id="s-1",
        title="Kajian Fiqih",
        date=date(2025, 3, 14),
        start_time=start,
        end_time=time(21, 0),
    )


def test_factory_checkin_within_grace_is_present():
    start = datetime(2025, 3, 14, 19, 0)
    strategy = AttendanceStrategyFactory().for_checkin(
        now=datetime(2025, 3, 14, 19, 14, 59), session_start=start, grace_minutes=15
    )

    assert isinstance(strategy, PresentStrategy)


def test_factory_checkin_after_grace_is_late():
    start = datetime(2025, 3, 14, 19, 0)
    strategy = AttendanceStrategyFactory().for_checkin(
        now=datetime(2025, 3, 14, 19, 15, 1), session_start=start, grace_minutes=15
    )

    assert isinstance(strategy, LateStrategy)


def test_checkin_ten_minutes_after_start_is_present():
    decision = derive_status(_session(), datetime(2025, 3, 14, 19, 10), 15)

    assert decision.status == AttendanceStatus.PRESENT
    assert decision.note is None


def test_checkin_twenty_minutes_after_start_is_late_with_note():
    decision = derive_status(_session(), datetime(2025, 3, 14, 19, 20), 15)

    assert decision.status == AttendanceStatus.LATE
    assert decision.note == "Terlambat 20 menit"


def test_exact_threshold_boundary_is_present():
    decision = derive_status(_session(), datetime(2025, 3, 14, 19, 15, 0), 15)

    assert decision.status == AttendanceStatus.PRESENT


def test_zero_grace_makes_one_second_late():
    decision = derive_status(_session(), datetime(2025, 3, 14, 19, 0, 1), 0)

    assert decision.status == AttendanceStatus.LATE
    assert decision.note == "Terlambat 0 menit"


def test_checkin_before_start_is_present():
    decision = derive_status(_session(), datetime(2025, 3, 14, 18, 30), 15)

    assert decision.status == AttendanceStatus.PRESENT


def test_minutes_late_rounds_down():
    start = datetime(2025, 3, 14, 19, 0)

    assert minutes_late(datetime(2025, 3, 14, 19, 20, 59), start) == 20
