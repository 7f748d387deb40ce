from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Participant


class ParticipantRepository(Protocol):
    def get_by_id(self, participant_id: str) -> Optional[Participant]:
        raise NotImplementedError

    def get_by_qr(self, qr_code: str) -> Optional[Participant]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Participant]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Participant]:
        raise NotImplementedError

    def create(
        self,
        *,
        name: str,
        email: str,
        phone: Optional[str],
        qr_code: str,
        participant_id: Optional[str] = None,
    ) -> Participant:
        raise NotImplementedError

    def update(self, participant_id: str, **fields) -> Optional[Participant]:
        raise NotImplementedError

    def delete(self, participant_id: str) -> bool:
        raise NotImplementedError
