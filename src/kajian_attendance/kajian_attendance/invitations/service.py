from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import normalize_email, optional_phone, require_non_empty
from ..core.constants import INVITATION_VALID_HOURS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import Invitation
from .repository import InvitationRepository

logger = logging.getLogger(__name__)


class InvitationService:
    """Use case: admin invites a participant; delivery of the link is external."""

    def __init__(self, invitations: InvitationRepository):
        self._invitations = invitations

    def create(
        self,
        *,
        current_role: Role,
        created_by: str,
        name: str,
        email: str,
        phone: Optional[str] = None,
        now: datetime | None = None,
    ) -> Invitation:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Anda tidak memiliki akses")

        now = now or now_local()
        invitation = self._invitations.create(
            name=require_non_empty(name, "Nama"),
            email=normalize_email(email),
            phone=optional_phone(phone),
            token=secrets.token_urlsafe(32),
            created_by=created_by,
            expires_at=now + timedelta(hours=INVITATION_VALID_HOURS),
        )
        logger.info("Invitation created id=%s email=%s by=%s", invitation.invitation_id, invitation.email, created_by)
        return invitation

    def get_valid(self, *, token: str, email: str, now: datetime | None = None) -> Invitation:
        now = now or now_local()
        invitation = self._invitations.find_unused(token=(token or "").strip(), email=(email or "").strip().lower())
        if not invitation or not invitation.is_valid(now):
            raise ValidationError("Undangan tidak valid atau sudah kedaluwarsa")
        return invitation

    def list_pending(self) -> Sequence[Invitation]:
        return self._invitations.list_pending()
