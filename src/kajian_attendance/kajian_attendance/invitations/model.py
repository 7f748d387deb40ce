from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Invitation:
    invitation_id: str
    name: str
    email: str
    phone: Optional[str]
    token: str
    created_by: str
    expires_at: datetime
    used: bool = False

    def is_valid(self, now: datetime) -> bool:
        return not self.used and now < self.expires_at
