from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_clock_time, parse_iso_date
from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import KajianSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionService:
    """Use case: admin schedules and maintains kajian sessions."""

    def __init__(self, sessions: SessionRepository, attendance: AttendanceRepository):
        self._sessions = sessions
        self._attendance = attendance

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

    @staticmethod
    def _date(value: Any) -> date:
        if isinstance(value, date):
            return value
        try:
            return parse_iso_date(require_non_empty(value, "Tanggal"))
        except ValueError:
            raise ValidationError("Tanggal tidak valid (YYYY-MM-DD)")

    @staticmethod
    def _time(value: Any, field_name: str) -> time:
        if isinstance(value, time):
            return value
        try:
            return parse_clock_time(require_non_empty(value, field_name))
        except ValueError:
            raise ValidationError(f"{field_name} tidak valid (HH:MM)")

    @staticmethod
    def _capacity(value: Any) -> Optional[int]:
        if value in (None, ""):
            return None
        try:
            capacity = int(value)
        except (TypeError, ValueError):
            raise ValidationError("Kapasitas harus berupa angka")
        if capacity <= 0:
            raise ValidationError("Kapasitas harus lebih dari 0")
        return capacity

    def get(self, session_id: str) -> KajianSession:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise NotFoundError("Session tidak ditemukan")
        return session

    def list_all(self) -> Sequence[KajianSession]:
        return self._sessions.list_all()

    def list_active(self) -> Sequence[KajianSession]:
        return self._sessions.list_all(active_only=True)

    def create(
        self,
        *,
        current_role: Role,
        title: str,
        date: Any,
        start_time: Any,
        end_time: Any,
        description: Optional[str] = None,
        location: Optional[str] = None,
        max_participants: Any = None,
        created_by: Optional[str] = None,
    ) -> KajianSession:
        self._require_admin(current_role)

        title = require_non_empty(title, "Judul")
        start = self._time(start_time, "Waktu mulai")
        end = self._time(end_time, "Waktu selesai")
        if end <= start:
            raise ValidationError("Waktu selesai harus setelah waktu mulai")

        session = self._sessions.create(
            title=title,
            date=self._date(date),
            start_time=start,
            end_time=end,
            description=optional_text(description),
            location=optional_text(location),
            max_participants=self._capacity(max_participants),
            created_by=created_by,
        )
        logger.info("Session created id=%s title=%r date=%s", session.session_id, session.title, session.date)
        return session

    def update(self, *, current_role: Role, session_id: str, **changes: Any) -> KajianSession:
        self._require_admin(current_role)
        current = self.get(session_id)

        patch: dict[str, Any] = {}
        if "title" in changes:
            patch["title"] = require_non_empty(changes["title"], "Judul")
        if "description" in changes:
            patch["description"] = optional_text(changes["description"])
        if "location" in changes:
            patch["location"] = optional_text(changes["location"])
        if "date" in changes:
            patch["date"] = self._date(changes["date"])
        if "start_time" in changes:
            patch["start_time"] = self._time(changes["start_time"], "Waktu mulai")
        if "end_time" in changes:
            patch["end_time"] = self._time(changes["end_time"], "Waktu selesai")
        if "max_participants" in changes:
            patch["max_participants"] = self._capacity(changes["max_participants"])
        if not patch:
            raise ValidationError("Tidak ada perubahan")

        start = patch.get("start_time", current.start_time)
        end = patch.get("end_time", current.end_time)
        if end <= start:
            raise ValidationError("Waktu selesai harus setelah waktu mulai")

        patch["updated_at"] = datetime.now()
        updated = self._sessions.update(session_id, **patch)
        if not updated:
            raise ValidationError("Gagal mengupdate session")
        logger.info("Session updated id=%s fields=%s", session_id, sorted(patch))
        return updated

    def set_active(self, *, current_role: Role, session_id: str, is_active: bool) -> KajianSession:
        self._require_admin(current_role)
        self.get(session_id)
        updated = self._sessions.update(session_id, is_active=bool(is_active))
        if not updated:
            raise ValidationError("Gagal mengupdate session")
        logger.info("Session id=%s active=%s", session_id, updated.is_active)
        return updated

    def delete(self, *, current_role: Role, session_id: str) -> None:
        self._require_admin(current_role)
        self.get(session_id)

        removed = self._attendance.delete_for_session(session_id)
        if not self._sessions.delete(session_id):
            raise ValidationError("Gagal menghapus session")
        logger.info("Session deleted id=%s (attendance rows removed=%d)", session_id, removed)
