from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, time
from enum import Enum
from functools import wraps
from typing import Any

from flask import jsonify, request

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    OperationTimeout,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Terjadi kesalahan sistem, silakan coba lagi"

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (OperationTimeout, 504),
    (DomainError, 400),
)


def to_json(value: Any) -> Any:
    """Dataclasses/enums/dates to JSON-friendly values."""

    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(v) for v in value]
    return value


def json_ok(message: str | None = None, status: int = 200, **data: Any):
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body.update({k: to_json(v) for k, v in data.items()})
    return jsonify(body), status


def json_error(message: str, status: int = 400, **data: Any):
    body: dict[str, Any] = {"success": False, "message": message}
    body.update({k: to_json(v) for k, v in data.items()})
    return jsonify(body), status


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def api_errors(view):
    """Translate domain errors to JSON; anything else is logged as a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            for error_type, status in _STATUS_BY_ERROR:
                if isinstance(e, error_type):
                    break
            logger.info("%s rejected: %s", view.__name__, e)
            return json_error(str(e), status)
        except StoreError as e:
            logger.error("%s store failure table=%s op=%s: %s", view.__name__, e.table, e.operation, e.message)
            return json_error(GENERIC_ERROR, 500)
        except Exception:
            logger.exception("Unexpected error in %s", view.__name__)
            return json_error(GENERIC_ERROR, 500)

    return wrapper
