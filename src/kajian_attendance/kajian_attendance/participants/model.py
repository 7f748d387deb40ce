from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Participant:
    """Entitas domain: peserta kajian, dikenali lewat token QR."""

    participant_id: str
    name: str
    email: str
    phone: Optional[str]
    qr_code: Optional[str]
    is_blacklisted: bool = False
    blacklist_reason: Optional[str] = None


@dataclass(frozen=True)
class ParticipantStats:
    total: int
    active: int
    blacklisted: int
