from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional


@dataclass(frozen=True)
class KajianSession:
    """Entitas domain: satu sesi kajian terjadwal."""

    session_id: str
    title: str
    date: date
    start_time: time
    end_time: time
    description: Optional[str] = None
    location: Optional[str] = None
    max_participants: Optional[int] = None
    is_active: bool = True
    created_by: Optional[str] = None

    @property
    def starts_at(self) -> datetime:
        # Local wall-clock; no timezone normalization.
        return datetime.combine(self.date, self.start_time)

