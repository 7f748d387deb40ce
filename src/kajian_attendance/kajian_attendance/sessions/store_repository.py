from __future__ import annotations

from datetime import date, time
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import coerce_date, coerce_time
from ..database import tables
from ..database.store import DataStore, OrderBy
from .model import KajianSession
from .repository import SessionRepository


def row_to_session(row: Mapping[str, Any]) -> KajianSession:
    max_participants = row.get("max_participants")
    return KajianSession(
        session_id=str(row["id"]),
        title=row["title"],
        date=coerce_date(row["date"]),
        start_time=coerce_time(row["start_time"]),
        end_time=coerce_time(row["end_time"]),
        description=row.get("description"),
        location=row.get("location"),
        max_participants=int(max_participants) if max_participants is not None else None,
        is_active=bool(row.get("is_active", True)),
        created_by=row.get("created_by"),
    )


class StoreSessionRepository(SessionRepository):
    def __init__(self, store: DataStore):
        self._store = store

    def get_by_id(self, session_id: str) -> Optional[KajianSession]:
        row = self._store.select_one(tables.SESSIONS, {"id": session_id})
        return row_to_session(row) if row else None

    def get_active(self, session_id: str) -> Optional[KajianSession]:
        row = self._store.select_one(tables.SESSIONS, {"id": session_id, "is_active": True})
        return row_to_session(row) if row else None

    def list_all(self, *, active_only: bool = False) -> Sequence[KajianSession]:
        filters = {"is_active": True} if active_only else {}
        rows = self._store.select_many(
            tables.SESSIONS,
            filters,
            order_by=(OrderBy("date"), OrderBy("start_time")),
        )
        return [row_to_session(r) for r in rows]

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
        row = self._store.insert(
            tables.SESSIONS,
            {
                "title": title,
                "date": date,
                "start_time": start_time,
                "end_time": end_time,
                "description": description,
                "location": location,
                "max_participants": max_participants,
                "is_active": True,
                "created_by": created_by,
            },
        )
        return row_to_session(row)

    def update(self, session_id: str, **fields) -> Optional[KajianSession]:
        row = self._store.update(tables.SESSIONS, {"id": session_id}, fields)
        return row_to_session(row) if row else None

    def delete(self, session_id: str) -> bool:
        return self._store.delete(tables.SESSIONS, {"id": session_id}) > 0
