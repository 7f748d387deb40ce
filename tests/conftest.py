from __future__ import annotations

import copy
import uuid
from collections import defaultdict
from datetime import date, datetime, time
from typing import Any, Mapping, Optional, Sequence

import pytest

from src.kajian_attendance.kajian_attendance.core.exceptions import StoreError, UniqueViolation
from src.kajian_attendance.kajian_attendance.database.store import DataStore, Join, OrderBy, Record
from src.kajian_attendance.kajian_attendance.database.tables import UNIQUE_KEYS, columns_for

# Column defaults the MySQL schema would fill in.
_DEFAULTS = {"is_blacklisted": False, "is_active": True, "used": False}


class InMemoryDataStore(DataStore):
    """Dict-backed DataStore that enforces `id` and the composite unique keys.

    Failure injection:
    - ``fail_on[(table, operation)] = exc`` raises ``exc`` once on that call.
    - ``stale_reads`` holds tables whose ``select_one`` pretends nothing exists,
      which lets a test reproduce the check-then-insert race.
    """

    def __init__(self):
        self.tables: dict[str, dict[str, Record]] = defaultdict(dict)
        self.fail_on: dict[tuple[str, str], BaseException] = {}
        self.stale_reads: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def _enter(self, table: str, operation: str) -> None:
        columns_for(table)
        self.calls.append((table, operation))
        exc = self.fail_on.pop((table, operation), None)
        if exc is not None:
            raise exc

    @staticmethod
    def _matches(row: Mapping[str, Any], filters: Optional[Mapping[str, Any]]) -> bool:
        for key, value in (filters or {}).items():
            if isinstance(value, (list, tuple, set)):
                if row.get(key) not in value:
                    return False
            elif row.get(key) != value:
                return False
        return True

    def _check_unique(self, table: str, data: Mapping[str, Any], *, ignore_id: Optional[str] = None) -> None:
        for key in UNIQUE_KEYS.get(table, ()):
            for row in self.tables[table].values():
                if row["id"] == ignore_id:
                    continue
                if all(row.get(c) == data.get(c) for c in key):
                    raise UniqueViolation(
                        f"Duplicate entry for key {'_'.join(key)}", table=table, operation="insert"
                    )

    def rows(self, table: str) -> list[Record]:
        return [copy.deepcopy(r) for r in self.tables[table].values()]

    def select_one(self, table: str, filters: Mapping[str, Any]) -> Optional[Record]:
        self._enter(table, "select")
        if table in self.stale_reads:
            return None
        for row in self.tables[table].values():
            if self._matches(row, filters):
                return copy.deepcopy(row)
        return None

    def select_many(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        joins: Sequence[Join] = (),
        order_by: Sequence[OrderBy] = (),
    ) -> list[Record]:
        self._enter(table, "select")
        out = [copy.deepcopy(r) for r in self.tables[table].values() if self._matches(r, filters)]
        for order in reversed(order_by):
            out.sort(key=lambda r: r.get(order.column), reverse=order.descending)
        for row in out:
            for join in joins:
                target = self.tables[join.table].get(row.get(join.foreign_key))
                row[join.key] = copy.deepcopy(target) if target else None
        return out

    def insert(self, table: str, record: Mapping[str, Any]) -> Record:
        self._enter(table, "insert")
        data = dict(record)
        data.setdefault("id", str(uuid.uuid4()))
        if data["id"] in self.tables[table]:
            raise UniqueViolation("Duplicate entry for key PRIMARY", table=table, operation="insert")
        self._check_unique(table, data)
        for column, default in _DEFAULTS.items():
            if column in columns_for(table):
                data.setdefault(column, default)
        data.setdefault("created_at", datetime.now())
        self.tables[table][data["id"]] = data
        return copy.deepcopy(data)

    def update(self, table: str, filters: Mapping[str, Any], patch: Mapping[str, Any]) -> Optional[Record]:
        self._enter(table, "update")
        if not patch:
            raise StoreError("Data required for update operation", table=table, operation="update")
        first = None
        for row in self.tables[table].values():
            if self._matches(row, filters):
                row.update(patch)
                first = first or copy.deepcopy(row)
        return first

    def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        self._enter(table, "delete")
        if not filters:
            raise StoreError("Refusing to delete without filters", table=table, operation="delete")
        doomed = [rid for rid, row in self.tables[table].items() if self._matches(row, filters)]
        for rid in doomed:
            del self.tables[table][rid]
        return len(doomed)

    def upsert(self, table: str, record: Mapping[str, Any], conflict_key: str = "id") -> Record:
        self._enter(table, "upsert")
        data = dict(record)
        for row in self.tables[table].values():
            if row.get(conflict_key) == data.get(conflict_key):
                row.update(data)
                return copy.deepcopy(row)
        data.setdefault("id", str(uuid.uuid4()))
        self._check_unique(table, data)
        data.setdefault("created_at", datetime.now())
        self.tables[table][data["id"]] = data
        return copy.deepcopy(data)


class FakeClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def store() -> InMemoryDataStore:
    return InMemoryDataStore()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_day() -> date:
    return date(2025, 3, 14)


@pytest.fixture
def kajian_session(store, session_day):
    """An active session from 19:00 to 21:00."""

    from src.kajian_attendance.kajian_attendance.sessions.store_repository import StoreSessionRepository

    return StoreSessionRepository(store).create(
        title="Kajian Tafsir",
        date=session_day,
        start_time=time(19, 0),
        end_time=time(21, 0),
        description=None,
        location="Masjid Al-Ikhlas",
        max_participants=50,
        created_by=None,
    )


@pytest.fixture
def settings():
    from src.kajian_attendance.kajian_attendance.settings.store import InMemorySettingsStore

    return InMemorySettingsStore(15)


@pytest.fixture
def container(store, settings):
    from src.kajian_attendance.kajian_attendance.container import build_container

    return build_container(store=store, settings=settings)


@pytest.fixture
def participant(container):
    return container.participants_repo.create(
        name="Ahmad Fauzi",
        email="ahmad@example.com",
        phone="081234567890",
        qr_code="QR_ahmad_example.com_abcd1234",
    )
