from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..database import tables
from ..database.store import DataStore, OrderBy
from .model import Participant
from .repository import ParticipantRepository


def row_to_participant(row: Mapping[str, Any]) -> Participant:
    return Participant(
        participant_id=str(row["id"]),
        name=row["name"],
        email=row["email"],
        phone=row.get("phone"),
        qr_code=row.get("qr_code"),
        is_blacklisted=bool(row.get("is_blacklisted", False)),
        blacklist_reason=row.get("blacklist_reason"),
    )


class StoreParticipantRepository(ParticipantRepository):
    def __init__(self, store: DataStore):
        self._store = store

    def _one(self, filters: dict) -> Optional[Participant]:
        row = self._store.select_one(tables.PARTICIPANTS, filters)
        return row_to_participant(row) if row else None

    def get_by_id(self, participant_id: str) -> Optional[Participant]:
        return self._one({"id": participant_id})

    def get_by_qr(self, qr_code: str) -> Optional[Participant]:
        return self._one({"qr_code": qr_code})

    def get_by_email(self, email: str) -> Optional[Participant]:
        return self._one({"email": email})

    def list_all(self) -> Sequence[Participant]:
        rows = self._store.select_many(tables.PARTICIPANTS, {}, order_by=(OrderBy("name"),))
        return [row_to_participant(r) for r in rows]

    def create(
        self,
        *,
        name: str,
        email: str,
        phone: Optional[str],
        qr_code: str,
        participant_id: Optional[str] = None,
    ) -> Participant:
        record: dict[str, Any] = {
            "name": name,
            "email": email,
            "phone": phone,
            "qr_code": qr_code,
            "is_blacklisted": False,
            "blacklist_reason": None,
        }
        if participant_id:
            record["id"] = participant_id
        return row_to_participant(self._store.insert(tables.PARTICIPANTS, record))

    def update(self, participant_id: str, **fields) -> Optional[Participant]:
        row = self._store.update(tables.PARTICIPANTS, {"id": participant_id}, fields)
        return row_to_participant(row) if row else None

    def delete(self, participant_id: str) -> bool:
        return self._store.delete(tables.PARTICIPANTS, {"id": participant_id}) > 0
