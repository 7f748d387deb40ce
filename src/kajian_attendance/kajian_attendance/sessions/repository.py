from __future__ import annotations

from datetime import date, time
from typing import Optional, Protocol, Sequence

from .model import KajianSession


class SessionRepository(Protocol):
    def get_by_id(self, session_id: str) -> Optional[KajianSession]:
        raise NotImplementedError

    def get_active(self, session_id: str) -> Optional[KajianSession]:
        """Return the session only when it exists AND is active."""

        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[KajianSession]:
        raise NotImplementedError

    def create(
        self,
        *,
        title: str,
        date: date,
        start_time: time,
        end_time: time,
        description: Optional[str] = None,
        location: Optional[str] = None,
        max_participants: Optional[int] = None,
        created_by: Optional[str] = None,
    ) -> KajianSession:
        raise NotImplementedError

    def update(self, session_id: str, **fields) -> Optional[KajianSession]:
        raise NotImplementedError

    def delete(self, session_id: str) -> bool:
        raise NotImplementedError
