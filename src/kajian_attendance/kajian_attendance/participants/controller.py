from __future__ import annotations

from flask import Flask, request, send_file

from ..container import Container
from ..core.exceptions import AuthorizationError
from ..web.guards import admin_required, login_required, participant_required
from ..web.responses import api_errors, json_body, json_error, json_ok
from .qr import render_qr_png


def register(app: Flask, container: Container) -> None:
    @app.route("/api/participants", methods=["GET"], endpoint="participants_list")
    @admin_required
    @api_errors
    def list_participants(auth):
        participants = container.participant_service.list_all(search=request.args.get("search", ""))
        return json_ok(participants=participants)

    @app.route("/api/participants/stats", methods=["GET"], endpoint="participants_stats")
    @admin_required
    @api_errors
    def participant_stats(auth):
        return json_ok(stats=container.participant_service.stats())

    @app.route("/api/participants", methods=["POST"], endpoint="participants_create")
    @admin_required
    @api_errors
    def create_participant(auth):
        """Admin registers a participant with a login account and a temporary password."""

        data = json_body()
        result = container.provisioning_service.admin_create_participant(
            current_role=auth.role,
            name=data.get("name", ""),
            email=data.get("email", ""),
            phone=data.get("phone"),
        )
        if not result.success:
            return json_error(result.error, 400)
        return json_ok(
            "Peserta berhasil ditambahkan",
            201,
            participant=result.participant,
            temporary_password=result.get("temporary_password"),
        )

    @app.route("/api/participants/roster", methods=["POST"], endpoint="participants_create_roster")
    @admin_required
    @api_errors
    def create_roster_entry(auth):
        data = json_body()
        participant = container.participant_service.create(
            current_role=auth.role,
            name=data.get("name", ""),
            email=data.get("email", ""),
            phone=data.get("phone"),
        )
        return json_ok("Peserta berhasil ditambahkan", 201, participant=participant)

    @app.route("/api/participants/<participant_id>", methods=["GET"], endpoint="participants_get")
    @login_required
    @api_errors
    def get_participant(auth, participant_id: str):
        if not auth.is_admin and auth.participant_id != participant_id:
            raise AuthorizationError("Anda tidak memiliki akses")
        return json_ok(participant=container.participant_service.get(participant_id))

    @app.route("/api/participants/<participant_id>", methods=["PUT", "PATCH"], endpoint="participants_update")
    @login_required
    @api_errors
    def update_participant(auth, participant_id: str):
        # Participants may edit their own name/phone; admins anyone's.
        if not auth.is_admin and auth.participant_id != participant_id:
            raise AuthorizationError("Anda tidak memiliki akses")
        data = json_body()
        updated = container.participant_service.update(
            participant_id=participant_id,
            name=data.get("name", ""),
            phone=data.get("phone"),
        )
        return json_ok("Profil berhasil diupdate", participant=updated)

    @app.route("/api/participants/<participant_id>/blacklist", methods=["POST"], endpoint="participants_blacklist")
    @admin_required
    @api_errors
    def blacklist_participant(auth, participant_id: str):
        data = json_body()
        blacklisted = bool(data.get("blacklisted", True))
        updated = container.participant_service.set_blacklist(
            current_role=auth.role,
            participant_id=participant_id,
            blacklisted=blacklisted,
            reason=data.get("reason"),
        )
        message = "Peserta di-blacklist" if updated.is_blacklisted else "Blacklist peserta dicabut"
        return json_ok(message, participant=updated)

    @app.route("/api/participants/<participant_id>", methods=["DELETE"], endpoint="participants_delete")
    @admin_required
    @api_errors
    def delete_participant(auth, participant_id: str):
        container.participant_service.delete(current_role=auth.role, participant_id=participant_id)
        return json_ok("Peserta berhasil dihapus")

    @app.route("/api/participants/<participant_id>/qr.png", methods=["GET"], endpoint="participants_qr_image")
    @login_required
    @api_errors
    def participant_qr_image(auth, participant_id: str):
        if not auth.is_admin and auth.participant_id != participant_id:
            raise AuthorizationError("Anda tidak memiliki akses")
        participant = container.participant_service.get(participant_id)
        return send_file(render_qr_png(participant.qr_code), mimetype="image/png")

    @app.route("/api/me/qr.png", methods=["GET"], endpoint="participants_my_qr_image")
    @participant_required
    @api_errors
    def my_qr_image(auth):
        participant = container.participant_service.get(auth.participant_id)
        return send_file(render_qr_png(participant.qr_code), mimetype="image/png")
