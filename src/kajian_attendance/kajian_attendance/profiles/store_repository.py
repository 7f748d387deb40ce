from __future__ import annotations

from typing import Any, Mapping, Optional

from ..core.enums import Role
from ..database import tables
from ..database.store import DataStore
from .model import Profile
from .repository import ProfileRepository


def row_to_profile(row: Mapping[str, Any]) -> Profile:
    participant_id = row.get("participant_id")
    return Profile(
        profile_id=str(row["id"]),
        email=row["email"],
        role=Role(row["role"]),
        participant_id=str(participant_id) if participant_id else None,
    )


class StoreProfileRepository(ProfileRepository):
    def __init__(self, store: DataStore):
        self._store = store

    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        row = self._store.select_one(tables.PROFILES, {"id": profile_id})
        return row_to_profile(row) if row else None

    def get_by_participant(self, participant_id: str) -> Optional[Profile]:
        row = self._store.select_one(tables.PROFILES, {"participant_id": participant_id})
        return row_to_profile(row) if row else None

    def upsert(self, *, profile_id: str, email: str, role: Role, participant_id: Optional[str]) -> Profile:
        row = self._store.upsert(
            tables.PROFILES,
            {"id": profile_id, "email": email, "role": role.value, "participant_id": participant_id},
            conflict_key="id",
        )
        return row_to_profile(row)

    def delete(self, profile_id: str) -> bool:
        return self._store.delete(tables.PROFILES, {"id": profile_id}) > 0

    def count_admins(self) -> int:
        return len(self._store.select_many(tables.PROFILES, {"role": Role.ADMIN.value}))
