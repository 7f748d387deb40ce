from __future__ import annotations

import logging
import secrets
import time
from datetime import datetime
from typing import Any, Callable, Optional

from werkzeug.security import generate_password_hash

from ..auth.repository import AccountRepository
from ..common.datetime_utils import now_local
from ..common.validators import normalize_email, optional_phone, require_non_empty
from ..core.constants import PROVISIONING_TIMEOUT_SECONDS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, OperationTimeout, StoreError, ValidationError
from ..core.result import Result
from ..invitations.repository import InvitationRepository
from ..participants.qr import derive_qr_token
from ..participants.repository import ParticipantRepository
from ..profiles.model import Profile
from ..profiles.repository import ProfileRepository
from .saga import CancellationToken, Clock, Saga

logger = logging.getLogger(__name__)

_STEP_LABELS = {
    "account": "akun",
    "invitation": "undangan",
    "participant": "data peserta",
    "profile": "profil",
    "mark_used": "status undangan",
}


class ProvisioningService:
    """Creates a Participant and its linked Profile together, or neither.

    Every public method returns a ``Result``; expected failures are logged and
    reported, never raised.
    """

    def __init__(
        self,
        participants: ParticipantRepository,
        profiles: ProfileRepository,
        invitations: InvitationRepository,
        accounts: Optional[AccountRepository] = None,
        *,
        timeout_seconds: float = PROVISIONING_TIMEOUT_SECONDS,
        clock: Clock = time.monotonic,
    ):
        self._participants = participants
        self._profiles = profiles
        self._invitations = invitations
        self._accounts = accounts
        self._timeout = timeout_seconds
        self._clock = clock

    def _token(self, timeout_seconds: Optional[float] = None) -> CancellationToken:
        return CancellationToken(self._timeout if timeout_seconds is None else timeout_seconds, clock=self._clock)

    # -- step builders -------------------------------------------------------

    def _participant_step(self, saga: Saga, *, account_id: str, fields: Callable[[dict], dict]) -> None:
        def create(results: dict) -> Any:
            data = fields(results)
            participant = self._participants.create(
                name=data["name"],
                email=data["email"],
                phone=data["phone"],
                qr_code=derive_qr_token(data["email"], account_id),
            )
            logger.info("Participant created id=%s for account=%s", participant.participant_id, account_id)
            return participant

        def remove(participant) -> None:
            logger.info("Rolling back participant id=%s", participant.participant_id)
            self._participants.delete(participant.participant_id)

        saga.step("participant", create, remove)

    def _profile_step(self, saga: Saga, *, account_id: str, email: Callable[[dict], str]) -> None:
        previous: dict[str, Optional[Profile]] = {}

        def upsert(results: dict) -> Profile:
            # Sign-up may already have left a bare profile for this account.
            previous["profile"] = self._profiles.get_by_id(account_id)
            participant = results["participant"]
            profile = self._profiles.upsert(
                profile_id=account_id,
                email=email(results),
                role=Role.PARTICIPANT,
                participant_id=participant.participant_id,
            )
            logger.info("Profile upserted id=%s participant=%s", account_id, participant.participant_id)
            return profile

        def restore(_profile: Profile) -> None:
            prior = previous.get("profile")
            if prior is None:
                self._profiles.delete(account_id)
                return
            self._profiles.upsert(
                profile_id=prior.profile_id,
                email=prior.email,
                role=prior.role,
                participant_id=prior.participant_id,
            )

        saga.step("profile", upsert, restore)

    def _run(self, saga: Saga, operation: str, **context: Any) -> Result:
        try:
            results = saga.execute()
        except OperationTimeout as e:
            logger.error("%s timed out %s", operation, context)
            return Result.fail(e)
        except (DomainError, StoreError) as e:
            message = getattr(e, "message", None) or str(e)
            label = _STEP_LABELS.get(saga.failed_step or "")
            if label and isinstance(e, StoreError):
                message = f"Gagal membuat {label}: {message}"
            logger.error("%s failed at step=%s %s: %s", operation, saga.failed_step, context, message)
            return Result.fail(message)
        return Result.ok(**results)

    # -- flows ---------------------------------------------------------------

    def create_participant_profile(self, account_id: str, email: str, name: str, phone: Optional[str]) -> Result:
        logger.info("Starting participant provisioning account=%s email=%s", account_id, email)
        try:
            data = {
                "name": require_non_empty(name, "Nama"),
                "email": normalize_email(email),
                "phone": optional_phone(phone),
            }
        except ValidationError as e:
            return Result.fail(e)

        saga = Saga("create_participant_profile", token=self._token())
        self._participant_step(saga, account_id=account_id, fields=lambda _: data)
        self._profile_step(saga, account_id=account_id, email=lambda _: data["email"])
        return self._run(saga, "create_participant_profile", account_id=account_id)

    def create_admin_profile(self, account_id: str, email: str) -> Result:
        try:
            email = normalize_email(email)
            profile = self._profiles.upsert(profile_id=account_id, email=email, role=Role.ADMIN, participant_id=None)
        except (ValidationError, StoreError) as e:
            logger.error("create_admin_profile failed account=%s: %s", account_id, e)
            return Result.fail(e)
        logger.info("Admin profile created account=%s", account_id)
        return Result.ok(profile=profile)

    def create_participant_from_invitation(
        self,
        account_id: str,
        email: str,
        invitation_token: str,
        *,
        now: datetime | None = None,
        timeout_seconds: float | None = None,
    ) -> Result:
        """Accept an invitation: participant + profile, then mark the invitation used.

        The deadline is checked before each write; after it passes, no further
        step runs and the completed ones are rolled back.
        """

        now = now or now_local()
        email = (email or "").strip().lower()
        saga = Saga("create_participant_from_invitation", token=self._token(timeout_seconds))

        def find_invitation(_results: dict):
            invitation = self._invitations.find_unused(token=(invitation_token or "").strip(), email=email)
            if not invitation or not invitation.is_valid(now):
                raise ValidationError("Undangan tidak valid atau sudah kedaluwarsa")
            return invitation

        def invitation_fields(results: dict) -> dict:
            invitation = results["invitation"]
            return {"name": invitation.name, "email": invitation.email, "phone": invitation.phone}

        def mark_used(results: dict) -> str:
            invitation_id = results["invitation"].invitation_id
            self._invitations.set_used(invitation_id, True)
            return invitation_id

        saga.step("invitation", find_invitation)
        self._participant_step(saga, account_id=account_id, fields=invitation_fields)
        self._profile_step(saga, account_id=account_id, email=lambda results: results["invitation"].email)
        saga.step("mark_used", mark_used, lambda invitation_id: self._invitations.set_used(invitation_id, False))

        return self._run(saga, "create_participant_from_invitation", account_id=account_id, email=email)

    def admin_create_participant(
        self,
        *,
        current_role: Role,
        name: str,
        email: str,
        phone: Optional[str] = None,
    ) -> Result:
        """Admin registers a participant directly: account, participant, profile."""

        if current_role != Role.ADMIN:
            return Result.fail(AuthorizationError("Anda tidak memiliki akses"))
        if self._accounts is None:
            return Result.fail("Pembuatan akun tidak tersedia")
        try:
            data = {
                "name": require_non_empty(name, "Nama"),
                "email": normalize_email(email),
                "phone": optional_phone(phone),
            }
        except ValidationError as e:
            return Result.fail(e)

        temporary_password = secrets.token_urlsafe(9)
        accounts = self._accounts
        saga = Saga("admin_create_participant", token=self._token())
        saga.step(
            "account",
            lambda _: accounts.create(email=data["email"], password_hash=generate_password_hash(temporary_password)),
            lambda account: accounts.delete(account.account_id),
        )

        # The account id is only known once the first step ran.
        def create_participant(results: dict):
            account_id = results["account"].account_id
            return self._participants.create(
                name=data["name"],
                email=data["email"],
                phone=data["phone"],
                qr_code=derive_qr_token(data["email"], account_id),
            )

        def create_profile(results: dict) -> Profile:
            return self._profiles.upsert(
                profile_id=results["account"].account_id,
                email=data["email"],
                role=Role.PARTICIPANT,
                participant_id=results["participant"].participant_id,
            )

        saga.step("participant", create_participant, lambda p: self._participants.delete(p.participant_id))
        saga.step("profile", create_profile, lambda p: self._profiles.delete(p.profile_id))

        result = self._run(saga, "admin_create_participant", email=data["email"])
        if not result.success:
            return result
        return Result.ok(
            account_id=result.get("account").account_id,
            temporary_password=temporary_password,
            participant=result.participant,
            profile=result.profile,
        )
