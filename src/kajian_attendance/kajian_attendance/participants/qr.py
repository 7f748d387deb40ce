from __future__ import annotations

import io

import qrcode

from ..core.constants import QR_ID_PREFIX_LENGTH


def derive_qr_token(email: str, account_id: str) -> str:
    """Build the participant QR payload ``QR_<email>_<id prefix>``.

    Only the first '@' and the first '.' of the email are replaced. The id is
    truncated with no collision check.
    """

    safe_email = email.replace("@", "_", 1).replace(".", "_", 1)
    return f"QR_{safe_email}_{account_id[:QR_ID_PREFIX_LENGTH]}"


def render_qr_png(payload: str, *, box_size: int = 10, border: int = 2) -> io.BytesIO:
    """Encode `payload` as a PNG QR image and return a rewound buffer."""

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf
