from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.service import AttendanceService
from .attendance.store_repository import StoreAttendanceRepository
from .auth.service import AuthService
from .auth.store_repository import StoreAccountRepository
from .core.constants import DEFAULT_LATE_THRESHOLD_MINUTES, PROVISIONING_TIMEOUT_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_store import MySQLDataStore
from .database.store import DataStore
from .invitations.service import InvitationService
from .invitations.store_repository import StoreInvitationRepository
from .participants.service import ParticipantService
from .participants.store_repository import StoreParticipantRepository
from .profiles.store_repository import StoreProfileRepository
from .provisioning.service import ProvisioningService
from .sessions.service import SessionService
from .sessions.store_repository import StoreSessionRepository
from .settings.store import InMemorySettingsStore, JsonFileSettingsStore, SettingsStore


@dataclass(frozen=True)
class Container:
    store: DataStore
    settings: SettingsStore

    accounts_repo: StoreAccountRepository
    participants_repo: StoreParticipantRepository
    profiles_repo: StoreProfileRepository
    sessions_repo: StoreSessionRepository
    attendance_repo: StoreAttendanceRepository
    invitations_repo: StoreInvitationRepository

    auth_service: AuthService
    session_service: SessionService
    participant_service: ParticipantService
    attendance_service: AttendanceService
    invitation_service: InvitationService
    provisioning_service: ProvisioningService


def build_container(
    *,
    db_config: Optional[dict] = None,
    store: Optional[DataStore] = None,
    settings_file: Optional[str] = None,
    settings: Optional[SettingsStore] = None,
    late_threshold_default: int = DEFAULT_LATE_THRESHOLD_MINUTES,
    provisioning_timeout: float = PROVISIONING_TIMEOUT_SECONDS,
) -> Container:
    """Wire repositories and services.

    Tests pass an in-memory ``store``/``settings``; the app passes ``db_config``.
    """

    if store is None:
        if db_config is None:
            raise ValueError("build_container needs either db_config or store")
        store = MySQLDataStore(DatabaseConnection.get_instance(DBConfig.from_mapping(db_config)))

    if settings is None:
        if settings_file:
            settings = JsonFileSettingsStore(settings_file, default=late_threshold_default)
        else:
            settings = InMemorySettingsStore(default=late_threshold_default)

    accounts_repo = StoreAccountRepository(store)
    participants_repo = StoreParticipantRepository(store)
    profiles_repo = StoreProfileRepository(store)
    sessions_repo = StoreSessionRepository(store)
    attendance_repo = StoreAttendanceRepository(store)
    invitations_repo = StoreInvitationRepository(store)

    return Container(
        store=store,
        settings=settings,
        accounts_repo=accounts_repo,
        participants_repo=participants_repo,
        profiles_repo=profiles_repo,
        sessions_repo=sessions_repo,
        attendance_repo=attendance_repo,
        invitations_repo=invitations_repo,
        auth_service=AuthService(accounts_repo, profiles_repo),
        session_service=SessionService(sessions_repo, attendance_repo),
        participant_service=ParticipantService(participants_repo, attendance_repo, profiles_repo, accounts_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            sessions_repo,
            participants_repo,
            settings,
            strategy_factory=AttendanceStrategyFactory(),
        ),
        invitation_service=InvitationService(invitations_repo),
        provisioning_service=ProvisioningService(
            participants_repo,
            profiles_repo,
            invitations_repo,
            accounts_repo,
            timeout_seconds=provisioning_timeout,
        ),
    )
