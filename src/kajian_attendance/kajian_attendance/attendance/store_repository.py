from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import coerce_date, coerce_datetime, coerce_time
from ..core.enums import AttendanceStatus
from ..database import tables
from ..database.store import DataStore, Join, OrderBy
from .model import AttendanceHistoryRow, AttendanceRecord
from .repository import AttendanceRepository

_HISTORY_JOINS = (
    Join(tables.PARTICIPANTS, "participant_id"),
    Join(tables.SESSIONS, "session_id"),
)


def row_to_attendance(row: Mapping[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=str(row["id"]),
        participant_id=str(row["participant_id"]),
        session_id=str(row["session_id"]),
        check_in_time=coerce_datetime(row["check_in_time"]),
        check_out_time=coerce_datetime(row.get("check_out_time")),
        status=AttendanceStatus(row["status"]),
        notes=row.get("notes"),
    )


def row_to_history(row: Mapping[str, Any]) -> AttendanceHistoryRow:
    participant = row[tables.PARTICIPANTS]
    session = row[tables.SESSIONS]
    return AttendanceHistoryRow(
        attendance_id=str(row["id"]),
        participant_id=str(row["participant_id"]),
        session_id=str(row["session_id"]),
        participant_name=participant["name"],
        participant_email=participant["email"],
        participant_phone=participant.get("phone"),
        session_title=session["title"],
        session_date=coerce_date(session["date"]),
        start_time=coerce_time(session["start_time"]),
        end_time=coerce_time(session["end_time"]),
        location=session.get("location"),
        check_in_time=coerce_datetime(row["check_in_time"]),
        check_out_time=coerce_datetime(row.get("check_out_time")),
        status=AttendanceStatus(row["status"]),
        notes=row.get("notes"),
    )


class StoreAttendanceRepository(AttendanceRepository):
    def __init__(self, store: DataStore):
        self._store = store

    def get_for_participant_and_session(self, participant_id: str, session_id: str) -> Optional[AttendanceRecord]:
        row = self._store.select_one(
            tables.ATTENDANCE,
            {"participant_id": participant_id, "session_id": session_id},
        )
        return row_to_attendance(row) if row else None

    def create_checkin(
        self,
        *,
        participant_id: str,
        session_id: str,
        check_in_time: datetime,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        row = self._store.insert(
            tables.ATTENDANCE,
            {
                "participant_id": participant_id,
                "session_id": session_id,
                "check_in_time": check_in_time,
                "status": AttendanceStatus(status).value,
                "notes": notes,
            },
        )
        return row_to_attendance(row)

    def history(
        self,
        *,
        participant_id: Optional[str] = None,
        session_id: Optional[str] = None,
    ) -> Sequence[AttendanceHistoryRow]:
        filters: dict[str, Any] = {}
        if participant_id:
            filters["participant_id"] = participant_id
        if session_id:
            filters["session_id"] = session_id
        rows = self._store.select_many(
            tables.ATTENDANCE,
            filters,
            joins=_HISTORY_JOINS,
            order_by=(OrderBy("check_in_time", descending=True),),
        )
        # Rows whose participant/session vanished mid-cascade are skipped.
        return [row_to_history(r) for r in rows if r.get(tables.PARTICIPANTS) and r.get(tables.SESSIONS)]

    def delete_for_participant(self, participant_id: str) -> int:
        return self._store.delete(tables.ATTENDANCE, {"participant_id": participant_id})

    def delete_for_session(self, session_id: str) -> int:
        return self._store.delete(tables.ATTENDANCE, {"session_id": session_id})

