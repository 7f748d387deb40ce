from __future__ import annotations

import logging

from flask import Flask, request

from ..container import Container
from ..core.enums import CheckInResult
from ..web.guards import admin_required, login_required
from ..web.responses import api_errors, json_body, json_error, json_ok
from .export import csv_filename, export_csv

logger = logging.getLogger(__name__)

# A repeat check-in is informational, not an error.
_INFORMATIONAL = {CheckInResult.CHECKED_IN, CheckInResult.ALREADY_CHECKED_IN}

_STATUS_BY_RESULT = {
    CheckInResult.CHECKED_IN: 201,
    CheckInResult.ALREADY_CHECKED_IN: 200,
    CheckInResult.SESSION_UNAVAILABLE: 404,
    CheckInResult.PROFILE_NOT_LINKED: 400,
    CheckInResult.UNKNOWN_QR: 404,
    CheckInResult.BLACKLISTED: 403,
}


def register(app: Flask, container: Container) -> None:
    def _outcome_response(outcome):
        payload = dict(result=outcome.result, record=outcome.record, session=outcome.session, participant=outcome.participant)
        status = _STATUS_BY_RESULT[outcome.result]
        if outcome.result in _INFORMATIONAL:
            return json_ok(outcome.message, status, **payload)
        return json_error(outcome.message, status, **payload)

    def _history_scope(auth):
        # Participants only ever see their own rows.
        if auth.is_admin:
            return request.args.get("participant_id") or None
        return auth.participant_id or ""

    @app.route("/api/checkin", methods=["POST"], endpoint="checkin")
    @login_required
    @api_errors
    def checkin(auth):
        """Participant scans the session QR (payload is the session id)."""

        data = json_body()
        session_id = (data.get("session_id") or "").strip()
        if not session_id:
            return json_error("Session QR tidak boleh kosong", 400)
        outcome = container.attendance_service.self_check_in(auth.profile, session_id)
        return _outcome_response(outcome)

    @app.route("/api/admin/scan", methods=["POST"], endpoint="admin_scan")
    @admin_required
    @api_errors
    def admin_scan(auth):
        """Admin scans a participant QR for the selected session."""

        data = json_body()
        qr_code = (data.get("qr_code") or "").strip()
        session_id = (data.get("session_id") or "").strip()
        if not qr_code:
            return json_error("QR Code tidak boleh kosong", 400)
        if not session_id:
            return json_error("Pilih session terlebih dahulu", 400)
        outcome = container.attendance_service.admin_check_in(qr_code, session_id)
        logger.info("Admin scan by=%s session=%s result=%s", auth.account_id, session_id, outcome.result.value)
        return _outcome_response(outcome)

    @app.route("/api/admin/scan/lookup", methods=["POST"], endpoint="admin_scan_lookup")
    @admin_required
    @api_errors
    def admin_scan_lookup(auth):
        participant = container.attendance_service.lookup_qr(json_body().get("qr_code") or "")
        return json_ok(participant=participant)

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    @api_errors
    def attendance_history(auth):
        scope = _history_scope(auth)
        if scope == "":
            return json_ok(records=[], summary=container.attendance_service.summary([]))
        records = container.attendance_service.history(
            participant_id=scope,
            search=request.args.get("search", ""),
            month=request.args.get("month", ""),
        )
        return json_ok(records=records, summary=container.attendance_service.summary(records))

    @app.route("/api/attendance/history.csv", methods=["GET"], endpoint="attendance_history_csv")
    @login_required
    @api_errors
    def attendance_history_csv(auth):
        scope = _history_scope(auth)
        records = []
        if scope != "":
            records = container.attendance_service.history(
                participant_id=scope,
                search=request.args.get("search", ""),
                month=request.args.get("month", ""),
            )
        filename = csv_filename()
        logger.info("CSV export account=%s rows=%d file=%s", auth.account_id, len(records), filename)
        return app.response_class(
            export_csv(records).encode("utf-8"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/attendance/report", methods=["GET"], endpoint="attendance_report")
    @login_required
    @api_errors
    def attendance_report(auth):
        """Per-session present/late/absent view for one participant."""

        participant_id = request.args.get("participant_id") if auth.is_admin else auth.participant_id
        if not participant_id:
            return json_error("Profil participant tidak ditemukan", 400)
        return json_ok(sessions=container.attendance_service.participant_report(participant_id))

    @app.route("/api/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @admin_required
    @api_errors
    def admin_dashboard(auth):
        return json_ok(stats=container.attendance_service.dashboard())
