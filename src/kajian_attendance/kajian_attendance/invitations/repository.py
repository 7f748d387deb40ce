from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Invitation


class InvitationRepository(Protocol):
    def create(
        self,
        *,
        name: str,
        email: str,
        phone: Optional[str],
        token: str,
        created_by: str,
        expires_at: datetime,
    ) -> Invitation:
        raise NotImplementedError

    def find_unused(self, *, token: str, email: str) -> Optional[Invitation]:
        raise NotImplementedError

    def set_used(self, invitation_id: str, used: bool = True) -> bool:
        raise NotImplementedError

    def list_pending(self) -> Sequence[Invitation]:
        raise NotImplementedError
