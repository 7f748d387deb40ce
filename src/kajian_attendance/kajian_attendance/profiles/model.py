from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Profile:
    """Role record of a signed-in account; `profile_id` equals the account id.

    A participant profile whose `participant_id` is still None is mid-provisioning.
    """

    profile_id: str
    email: str
    role: Role
    participant_id: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
