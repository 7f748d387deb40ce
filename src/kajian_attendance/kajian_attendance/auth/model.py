from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..profiles.model import Profile


@dataclass(frozen=True)
class Account:
    account_id: str
    email: str
    password_hash: str


@dataclass(frozen=True)
class AuthContext:
    """Signed-in account and its profile, resolved once per request.

    Passed explicitly to whatever needs it; there is no module-level state.
    `profile` may be None right after sign-up while provisioning is running.
    """

    account_id: str
    email: str
    profile: Optional[Profile] = None

    @property
    def role(self) -> Optional[Role]:
        return self.profile.role if self.profile else None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def participant_id(self) -> Optional[str]:
        return self.profile.participant_id if self.profile else None
