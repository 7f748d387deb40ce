from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_PHONE_RE = re.compile(r"^\+?[0-9][0-9\s-]{6,19}$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} wajib diisi")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} minimal {min_len} karakter")
    return value


def normalize_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Format email tidak valid")
    return email


def optional_phone(value: Optional[str]) -> Optional[str]:
    phone = (value or "").strip()
    if not phone:
        return None
    if not _PHONE_RE.match(phone):
        raise ValidationError("Format nomor telepon tidak valid")
    return phone


def optional_text(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None
