from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Sequence

Record = dict[str, Any]


@dataclass(frozen=True)
class Join:
    """Embed the row of `table` referenced by `foreign_key` under `alias`.

    Mirrors the nested shape a hosted Postgres API returns, e.g.
    ``{"id": ..., "participants": {"name": ...}, "kajian_sessions": {...}}``.
    """

    table: str
    foreign_key: str
    alias: Optional[str] = None

    @property
    def key(self) -> str:
        return self.alias or self.table


@dataclass(frozen=True)
class OrderBy:
    column: str
    descending: bool = False


class DataStore(Protocol):
    """Generic data-access contract used by every repository.

    Filters are equality maps; a list/tuple value means ``IN (...)``.
    Every failure raises ``StoreError`` (``UniqueViolation`` on key collisions).
    """

    def select_one(self, table: str, filters: Mapping[str, Any]) -> Optional[Record]:
        raise NotImplementedError

    def select_many(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        joins: Sequence[Join] = (),
        order_by: Sequence[OrderBy] = (),
    ) -> list[Record]:
        raise NotImplementedError

    def insert(self, table: str, record: Mapping[str, Any]) -> Record:
        raise NotImplementedError

    def update(self, table: str, filters: Mapping[str, Any], patch: Mapping[str, Any]) -> Optional[Record]:
        """Apply `patch` to matching rows, return the first updated row (or None)."""

        raise NotImplementedError

    def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        """Delete matching rows, return how many were removed."""

        raise NotImplementedError

    def upsert(self, table: str, record: Mapping[str, Any], conflict_key: str = "id") -> Record:
        raise NotImplementedError
