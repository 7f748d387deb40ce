from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import Flask, g, session

from ..auth.model import AuthContext
from ..container import Container
from ..core.enums import Role
from .responses import json_error

logger = logging.getLogger(__name__)

SESSION_KEY = "account_id"


def install_auth_context(app: Flask, container: Container) -> None:
    """Resolve the AuthContext once per request and drop it at teardown."""

    @app.before_request
    def load_auth_context():
        account_id = session.get(SESSION_KEY)
        g.auth = container.auth_service.load_context(account_id) if account_id else None
        if account_id and g.auth is None:
            # Account removed while the cookie was still around.
            session.pop(SESSION_KEY, None)

    @app.teardown_request
    def drop_auth_context(_exc):
        g.pop("auth", None)


def current_auth() -> Optional[AuthContext]:
    return g.get("auth")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        auth = current_auth()
        if auth is None:
            return json_error("Silakan login terlebih dahulu", 401)
        return view(auth, *args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        auth = current_auth()
        if auth is None:
            return json_error("Silakan login terlebih dahulu", 401)
        if not auth.is_admin:
            logger.warning("Admin route %s denied for account=%s", view.__name__, auth.account_id)
            return json_error("Anda tidak memiliki akses", 403)
        return view(auth, *args, **kwargs)

    return wrapper


def participant_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        auth = current_auth()
        if auth is None:
            return json_error("Silakan login terlebih dahulu", 401)
        if auth.role != Role.PARTICIPANT:
            return json_error("Halaman ini khusus peserta", 403)
        return view(auth, *args, **kwargs)

    return wrapper
