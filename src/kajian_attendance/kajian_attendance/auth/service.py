from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import normalize_email, require_min_length
from ..core.exceptions import AuthenticationError, UniqueViolation, ValidationError
from ..profiles.repository import ProfileRepository
from .model import Account, AuthContext
from .repository import AccountRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: local email/password accounts and per-request auth context."""

    def __init__(self, accounts: AccountRepository, profiles: ProfileRepository):
        self._accounts = accounts
        self._profiles = profiles

    def sign_up(self, email: str, password: str) -> Account:
        email = normalize_email(email)
        require_min_length(password, "Password", 6)

        if self._accounts.get_by_email(email):
            raise ValidationError("Email sudah terdaftar")

        try:
            account = self._accounts.create(email=email, password_hash=generate_password_hash(password))
        except UniqueViolation:
            raise ValidationError("Email sudah terdaftar")
        logger.info("Account created id=%s email=%s", account.account_id, email)
        return account

    def admin_signup_allowed(self, admin_code: str, expected_code: str) -> bool:
        """The first admin needs no code; later ones must present it."""

        if self._profiles.count_admins() == 0:
            return True
        return bool(expected_code) and (admin_code or "").strip() == expected_code

    def delete_account(self, account_id: str) -> None:
        if self._accounts.delete(account_id):
            logger.info("Account deleted id=%s", account_id)

    def sign_in(self, email: str, password: str) -> AuthContext:
        account = self._accounts.get_by_email((email or "").strip().lower())
        if not account:
            raise AuthenticationError("Email atau password salah")

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Email atau password salah")

        logger.info("Sign-in account=%s", account.account_id)
        return self.load_context(account.account_id)

    def sign_out(self, context: Optional[AuthContext]) -> None:
        if context:
            logger.info("Sign-out account=%s", context.account_id)

    def load_context(self, account_id: Optional[str]) -> Optional[AuthContext]:
        """Resolve the account and its profile; None when the account is gone."""

        if not account_id:
            return None
        account = self._accounts.get_by_id(account_id)
        if not account:
            return None
        return AuthContext(
            account_id=account.account_id,
            email=account.email,
            profile=self._profiles.get_by_id(account.account_id),
        )
