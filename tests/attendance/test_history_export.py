from __future__ import annotations

import csv
import io
from datetime import date, datetime, time

from src.kajian_attendance.kajian_attendance.attendance.export import CSV_COLUMNS, csv_filename, export_csv, to_csv_row
from src.kajian_attendance.kajian_attendance.attendance.history_filter import filter_records
from src.kajian_attendance.kajian_attendance.attendance.model import AttendanceHistoryRow
from src.kajian_attendance.kajian_attendance.core.enums import AttendanceStatus


def _row(name: str, title: str, session_date: date, status=AttendanceStatus.PRESENT, **overrides) -> AttendanceHistoryRow:
    values = dict(
        attendance_id=f"a-{name}-{session_date}",
        participant_id=f"p-{name}",
        session_id=f"s-{title}-{session_date}",
        participant_name=name,
        participant_email=f"{name.lower()}@example.com",
        participant_phone=None,
        session_title=title,
        session_date=session_date,
        start_time=time(19, 0),
        end_time=time(21, 0),
        location="Masjid Al-Ikhlas",
        check_in_time=datetime.combine(session_date, time(19, 5)),
        check_out_time=None,
        status=status,
        notes=None,
    )
    values.update(overrides)
    return AttendanceHistoryRow(**values)


RECORDS = [
    _row("Ahmad", "Kajian Tafsir", date(2025, 3, 14)),
    _row("Budi", "Kajian Fiqih", date(2025, 3, 21), AttendanceStatus.LATE, notes="Terlambat 20 menit"),
    _row("Citra", "Kajian Tafsir", date(2025, 4, 4)),
]


def test_empty_filters_return_everything_in_order():
    assert filter_records(RECORDS, "", "") == RECORDS


def test_search_is_case_insensitive_over_name_email_and_title():
    assert [r.participant_name for r in filter_records(RECORDS, "TAFSIR")] == ["Ahmad", "Citra"]
    assert [r.participant_name for r in filter_records(RECORDS, "budi@")] == ["Budi"]


def test_month_filter_matches_session_date_prefix():
    assert [r.participant_name for r in filter_records(RECORDS, "", "2025-03")] == ["Ahmad", "Budi"]


def test_search_and_month_combine():
    assert [r.participant_name for r in filter_records(RECORDS, "tafsir", "2025-04")] == ["Citra"]


def test_filter_is_idempotent():
    once = filter_records(RECORDS, "kajian", "2025-03")

    assert filter_records(once, "kajian", "2025-03") == once


def test_csv_has_header_and_one_line_per_record():
    text = export_csv(RECORDS)
    rows = list(csv.reader(io.StringIO(text)))

    assert rows[0] == list(CSV_COLUMNS)
    assert len(rows) == len(RECORDS) + 1
    assert [r[0] for r in rows[1:]] == ["Ahmad", "Budi", "Citra"]


def test_csv_of_no_records_is_header_only():
    assert export_csv([]) == ",".join(CSV_COLUMNS) + "\n"


def test_csv_row_formats_and_placeholders():
    row = to_csv_row(RECORDS[1])

    assert row == [
        "Budi",
        "budi@example.com",
        "Kajian Fiqih",
        "2025-03-21",
        "19:00:00 - 21:00:00",
        "21/03/2025 19:05",
        "-",
        "late",
        "Masjid Al-Ikhlas",
        "Terlambat 20 menit",
    ]


def test_csv_quotes_fields_with_commas():
    record = _row("Dewi, S.Pd", "Kajian Akhlak", date(2025, 3, 1), location=None)
    rows = list(csv.reader(io.StringIO(export_csv([record]))))

    assert rows[1][0] == "Dewi, S.Pd"
    assert rows[1][8] == "-"


def test_csv_filename_uses_iso_date():
    assert csv_filename(date(2025, 3, 14)) == "riwayat-kehadiran-2025-03-14.csv"


def test_service_history_joins_and_filters(container, kajian_session, participant):
    container.attendance_service.admin_check_in(
        participant.qr_code, kajian_session.session_id, now=datetime(2025, 3, 14, 19, 3)
    )

    [row] = container.attendance_service.history(search="ahmad", month="2025-03")

    assert row.participant_name == "Ahmad Fauzi"
    assert row.session_title == "Kajian Tafsir"
    assert row.status == AttendanceStatus.PRESENT
    assert container.attendance_service.history(month="2025-04") == []


def test_service_history_scoped_to_participant(container, kajian_session, participant):
    other = container.participants_repo.create(name="Lain", email="lain@example.com", phone=None, qr_code="QR_lain")
    container.attendance_service.admin_check_in(participant.qr_code, kajian_session.session_id)
    container.attendance_service.admin_check_in(other.qr_code, kajian_session.session_id)

    rows = container.attendance_service.history(participant_id=other.participant_id)

    assert [r.participant_name for r in rows] == ["Lain"]
