from __future__ import annotations

from typing import Iterable, Optional

from .model import AttendanceHistoryRow


def matches(record: AttendanceHistoryRow, search: Optional[str], month: Optional[str]) -> bool:
    term = (search or "").lower()
    matches_search = not term or any(
        term in field.lower()
        for field in (record.participant_name, record.participant_email, record.session_title)
    )
    matches_month = not month or record.session_date.isoformat().startswith(month)
    return matches_search and matches_month


def filter_records(
    records: Iterable[AttendanceHistoryRow],
    search: Optional[str] = "",
    month: Optional[str] = "",
) -> list[AttendanceHistoryRow]:
    """Keep records matching the free-text term and the ``YYYY-MM`` month token.

    Pure and order-preserving; empty term and month return every record.
    """

    return [r for r in records if matches(r, search, month)]
