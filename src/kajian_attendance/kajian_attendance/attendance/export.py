from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable, Optional

from ..core.constants import CSV_FILENAME_PREFIX, CSV_PLACEHOLDER
from .model import AttendanceHistoryRow

# Column order and the "-" placeholder are relied upon by downstream tools.
CSV_COLUMNS = (
    "Nama Peserta",
    "Email",
    "Session",
    "Tanggal",
    "Waktu Session",
    "Check-in",
    "Check-out",
    "Status",
    "Lokasi",
    "Catatan",
)

_STAMP_FORMAT = "%d/%m/%Y %H:%M"


def to_csv_row(record: AttendanceHistoryRow) -> list[str]:
    return [
        record.participant_name,
        record.participant_email,
        record.session_title,
        record.session_date.isoformat(),
        f"{record.start_time.strftime('%H:%M:%S')} - {record.end_time.strftime('%H:%M:%S')}",
        record.check_in_time.strftime(_STAMP_FORMAT),
        record.check_out_time.strftime(_STAMP_FORMAT) if record.check_out_time else CSV_PLACEHOLDER,
        record.status.value,
        record.location or CSV_PLACEHOLDER,
        record.notes or CSV_PLACEHOLDER,
    ]


def export_csv(records: Iterable[AttendanceHistoryRow]) -> str:
    """Serialize history rows as comma-separated text with a header row."""

    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for record in records:
        writer.writerow(to_csv_row(record))
    return out.getvalue()


def csv_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{CSV_FILENAME_PREFIX}-{today.isoformat()}.csv"
