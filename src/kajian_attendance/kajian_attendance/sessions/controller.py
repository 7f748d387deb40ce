from __future__ import annotations

from flask import Flask, send_file

from ..container import Container
from ..participants.qr import render_qr_png
from ..web.guards import admin_required, login_required
from ..web.responses import api_errors, json_body, json_ok

_EDITABLE_FIELDS = ("title", "description", "date", "start_time", "end_time", "location", "max_participants")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/sessions", methods=["GET"], endpoint="sessions_list")
    @login_required
    @api_errors
    def list_sessions(auth):
        # Participants only ever see sessions open for check-in.
        if auth.is_admin:
            sessions = container.session_service.list_all()
        else:
            sessions = container.session_service.list_active()
        return json_ok(sessions=sessions)

    @app.route("/api/sessions", methods=["POST"], endpoint="sessions_create")
    @admin_required
    @api_errors
    def create_session(auth):
        data = json_body()
        created = container.session_service.create(
            current_role=auth.role,
            title=data.get("title", ""),
            date=data.get("date", ""),
            start_time=data.get("start_time", ""),
            end_time=data.get("end_time", ""),
            description=data.get("description"),
            location=data.get("location"),
            max_participants=data.get("max_participants"),
            created_by=auth.account_id,
        )
        return json_ok("Session berhasil dibuat", 201, session=created)

    @app.route("/api/sessions/<session_id>", methods=["GET"], endpoint="sessions_get")
    @login_required
    @api_errors
    def get_session(auth, session_id: str):
        return json_ok(session=container.session_service.get(session_id))

    @app.route("/api/sessions/<session_id>", methods=["PUT", "PATCH"], endpoint="sessions_update")
    @admin_required
    @api_errors
    def update_session(auth, session_id: str):
        data = json_body()
        changes = {k: data[k] for k in _EDITABLE_FIELDS if k in data}
        updated = container.session_service.update(current_role=auth.role, session_id=session_id, **changes)
        return json_ok("Session berhasil diupdate", session=updated)

    @app.route("/api/sessions/<session_id>/toggle", methods=["POST"], endpoint="sessions_toggle")
    @admin_required
    @api_errors
    def toggle_session(auth, session_id: str):
        current = container.session_service.get(session_id)
        updated = container.session_service.set_active(
            current_role=auth.role, session_id=session_id, is_active=not current.is_active
        )
        message = "Session diaktifkan" if updated.is_active else "Session dinonaktifkan"
        return json_ok(message, session=updated)

    @app.route("/api/sessions/<session_id>", methods=["DELETE"], endpoint="sessions_delete")
    @admin_required
    @api_errors
    def delete_session(auth, session_id: str):
        container.session_service.delete(current_role=auth.role, session_id=session_id)
        return json_ok("Session berhasil dihapus")

    @app.route("/api/sessions/<session_id>/attendance", methods=["GET"], endpoint="sessions_attendance")
    @admin_required
    @api_errors
    def session_attendance(auth, session_id: str):
        session = container.session_service.get(session_id)
        records = container.attendance_service.session_attendance(session_id)
        return json_ok(session=session, records=records, count=len(records))

    @app.route("/api/sessions/<session_id>/qr.png", methods=["GET"], endpoint="sessions_qr_image")
    @admin_required
    @api_errors
    def session_qr_image(auth, session_id: str):
        """Printable QR participants scan to check themselves in."""

        session = container.session_service.get(session_id)
        return send_file(render_qr_png(session.session_id), mimetype="image/png")
