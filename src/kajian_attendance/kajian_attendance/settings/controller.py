from __future__ import annotations

import logging

from flask import Flask

from ..container import Container
from ..web.guards import admin_required
from ..web.responses import api_errors, json_body, json_ok

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings", methods=["GET"], endpoint="settings_get")
    @admin_required
    @api_errors
    def get_settings(auth):
        return json_ok(late_threshold_minutes=container.settings.get_late_threshold_minutes())

    @app.route("/api/settings", methods=["PUT", "POST"], endpoint="settings_update")
    @admin_required
    @api_errors
    def update_settings(auth):
        minutes = container.settings.set_late_threshold_minutes(json_body().get("late_threshold_minutes"))
        logger.info("Late threshold set to %d by=%s", minutes, auth.account_id)
        return json_ok("Pengaturan berhasil disimpan", late_threshold_minutes=minutes)
