from __future__ import annotations

from flask import Flask

from ..container import Container
from ..web.guards import admin_required
from ..web.responses import api_errors, json_body, json_ok


def register(app: Flask, container: Container) -> None:
    @app.route("/api/invitations", methods=["GET"], endpoint="invitations_list")
    @admin_required
    @api_errors
    def list_invitations(auth):
        return json_ok(invitations=container.invitation_service.list_pending())

    @app.route("/api/invitations", methods=["POST"], endpoint="invitations_create")
    @admin_required
    @api_errors
    def create_invitation(auth):
        # The token is returned to the admin; sending the link is done outside the app.
        data = json_body()
        invitation = container.invitation_service.create(
            current_role=auth.role,
            created_by=auth.account_id,
            name=data.get("name", ""),
            email=data.get("email", ""),
            phone=data.get("phone"),
        )
        return json_ok("Undangan berhasil dibuat", 201, invitation=invitation)
