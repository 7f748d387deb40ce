from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol

from ..core.constants import DEFAULT_LATE_THRESHOLD_MINUTES, MAX_LATE_THRESHOLD_MINUTES
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

LATE_THRESHOLD_KEY = "lateThresholdMinutes"


def validate_threshold(value) -> int:
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Batas keterlambatan harus berupa angka")
    if not 0 <= minutes <= MAX_LATE_THRESHOLD_MINUTES:
        raise ValidationError(f"Batas keterlambatan harus antara 0 dan {MAX_LATE_THRESHOLD_MINUTES} menit")
    return minutes


class SettingsStore(Protocol):
    """Operator-local configuration read at check-in time."""

    def get_late_threshold_minutes(self) -> int:
        raise NotImplementedError

    def set_late_threshold_minutes(self, minutes: int) -> int:
        raise NotImplementedError


class InMemorySettingsStore(SettingsStore):
    def __init__(self, minutes: int | None = None, *, default: int = DEFAULT_LATE_THRESHOLD_MINUTES):
        self._minutes = minutes
        self._default = default

    def get_late_threshold_minutes(self) -> int:
        return self._default if self._minutes is None else self._minutes

    def set_late_threshold_minutes(self, minutes: int) -> int:
        self._minutes = validate_threshold(minutes)
        return self._minutes


class JsonFileSettingsStore(SettingsStore):
    """Small JSON file holding the operator settings.

    A missing file, missing key or unparsable value falls back to the default.
    """

    def __init__(self, path: str | Path, *, default: int = DEFAULT_LATE_THRESHOLD_MINUTES):
        self._path = Path(path)
        self._default = default

    def _read(self) -> dict:
        try:
            with self._path.open(encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Settings file %s unreadable, using defaults: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get_late_threshold_minutes(self) -> int:
        raw = self._read().get(LATE_THRESHOLD_KEY)
        if raw is None:
            return self._default
        try:
            return int(raw)
        except (TypeError, ValueError):
            logger.warning("Invalid %s=%r in %s, using default", LATE_THRESHOLD_KEY, raw, self._path)
            return self._default

    def set_late_threshold_minutes(self, minutes: int) -> int:
        minutes = validate_threshold(minutes)
        data = self._read()
        data[LATE_THRESHOLD_KEY] = minutes

        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, self._path)
        logger.info("Late threshold set to %d minutes", minutes)
        return minutes
