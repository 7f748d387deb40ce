from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    def get_by_id(self, profile_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_participant(self, participant_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def upsert(self, *, profile_id: str, email: str, role: Role, participant_id: Optional[str]) -> Profile:
        """Create-or-replace keyed by `profile_id`."""

        raise NotImplementedError

    def delete(self, profile_id: str) -> bool:
        raise NotImplementedError

    def count_admins(self) -> int:
        raise NotImplementedError
