from __future__ import annotations

import logging

from flask import Flask, current_app, session

from ..container import Container
from ..web.guards import SESSION_KEY, current_auth, login_required
from ..web.responses import api_errors, json_body, json_error, json_ok

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _provisioning_failed(account_id: str, message: str):
        # Without a profile the account cannot do anything useful.
        container.auth_service.delete_account(account_id)
        return json_error(message, 400)

    @app.route("/api/auth/signup", methods=["POST"], endpoint="auth_signup")
    @api_errors
    def signup():
        """Participant self-registration, optionally through an invitation link."""

        data = json_body()
        account = container.auth_service.sign_up(data.get("email", ""), data.get("password", ""))

        invitation_token = (data.get("invitation_token") or "").strip()
        if invitation_token:
            result = container.provisioning_service.create_participant_from_invitation(
                account.account_id, account.email, invitation_token
            )
        else:
            result = container.provisioning_service.create_participant_profile(
                account.account_id, account.email, data.get("name", ""), data.get("phone")
            )
        if not result.success:
            return _provisioning_failed(account.account_id, result.error)

        session[SESSION_KEY] = account.account_id
        return json_ok(
            "Pendaftaran berhasil",
            201,
            profile=result.profile,
            participant=result.participant,
        )

    @app.route("/api/auth/admin/signup", methods=["POST"], endpoint="auth_admin_signup")
    @api_errors
    def admin_signup():
        data = json_body()
        if not container.auth_service.admin_signup_allowed(
            data.get("admin_code", ""), current_app.config.get("ADMIN_SIGNUP_CODE", "")
        ):
            return json_error("Kode admin tidak valid", 403)

        account = container.auth_service.sign_up(data.get("email", ""), data.get("password", ""))
        result = container.provisioning_service.create_admin_profile(account.account_id, account.email)
        if not result.success:
            return _provisioning_failed(account.account_id, f"Gagal membuat profil admin: {result.error}")

        logger.info("Admin account created id=%s", account.account_id)
        return json_ok("Akun admin berhasil dibuat! Silakan login.", 201, profile=result.profile)

    @app.route("/api/auth/signin", methods=["POST"], endpoint="auth_signin")
    @api_errors
    def signin():
        data = json_body()
        auth = container.auth_service.sign_in(data.get("email", ""), data.get("password", ""))
        session.clear()
        session[SESSION_KEY] = auth.account_id
        return json_ok("Login berhasil", account_id=auth.account_id, email=auth.email, profile=auth.profile)

    @app.route("/api/auth/signout", methods=["POST"], endpoint="auth_signout")
    def signout():
        container.auth_service.sign_out(current_auth())
        session.clear()
        return json_ok("Anda telah keluar")

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def me(auth):
        participant = None
        if auth.participant_id:
            participant = container.participants_repo.get_by_id(auth.participant_id)
        return json_ok(account_id=auth.account_id, email=auth.email, profile=auth.profile, participant=participant)
