from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Peran akun untuk otorisasi."""

    ADMIN = "admin"
    PARTICIPANT = "participant"


class AttendanceStatus(str, Enum):
    """Status kehadiran yang BOLEH disimpan ke tabel attendance.

    `absent` sengaja tidak ada di sini: ketidakhadiran hanya dihitung saat
    laporan ditampilkan (lihat ReportStatus).
    """

    PRESENT = "present"
    LATE = "late"


class ReportStatus(str, Enum):
    """Klasifikasi tampilan: dua status tersimpan + `absent` yang dihitung."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"

    @classmethod
    def from_stored(cls, status: AttendanceStatus) -> "ReportStatus":
        return cls(status.value)


class CheckInResult(str, Enum):
    """Hasil check-in yang ditampilkan berbeda-beda ke pengguna."""

    CHECKED_IN = "checked_in"
    ALREADY_CHECKED_IN = "already_checked_in"
    SESSION_UNAVAILABLE = "session_unavailable"
    PROFILE_NOT_LINKED = "profile_not_linked"
    UNKNOWN_QR = "unknown_qr"
    BLACKLISTED = "blacklisted"
