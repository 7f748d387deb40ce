from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Mapping, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import coerce_time
from ..core.exceptions import StoreError, UniqueViolation
from .connection import DatabaseConnection
from .store import DataStore, Join, OrderBy, Record
from .tables import columns_for

logger = logging.getLogger(__name__)

_BOOL_COLUMNS = {"is_blacklisted", "is_active", "used"}
_TIME_COLUMNS = {"start_time", "end_time"}
_JOIN_SEP = "__"


def _quote(identifier: str) -> str:
    return f"`{identifier}`"


def _normalize_row(row: Mapping[str, Any]) -> Record:
    out: Record = {}
    for key, value in row.items():
        if key in _BOOL_COLUMNS and value is not None:
            value = bool(value)
        elif key in _TIME_COLUMNS:
            value = coerce_time(value)
        out[key] = value
    return out


class MySQLDataStore(DataStore):
    """DataStore over mysql-connector with one short-lived connection per call."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def _cursor(self):
        # One connection per call; rolled back when the body raises.
        conn = self._conn_factory.connect()
        try:
            cur = conn.cursor(dictionary=True)
            try:
                yield cur
                conn.commit()
            finally:
                cur.close()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    # -- SQL helpers ---------------------------------------------------------

    @staticmethod
    def _check_columns(table: str, names: Sequence[str]) -> None:
        allowed = columns_for(table)
        unknown = [n for n in names if n not in allowed]
        if unknown:
            raise StoreError(f"Unknown column(s) for {table}: {', '.join(unknown)}", table=table)

    def _where(self, table: str, filters: Optional[Mapping[str, Any]], *, alias: str = "") -> tuple[str, list[Any]]:
        if not filters:
            return "", []
        self._check_columns(table, list(filters))
        prefix = f"{alias}." if alias else ""
        clauses: list[str] = []
        params: list[Any] = []
        for column, value in filters.items():
            col = f"{prefix}{_quote(column)}"
            if isinstance(value, (list, tuple, set)):
                values = list(value)
                if not values:
                    clauses.append("1=0")
                    continue
                clauses.append(f"{col} IN ({', '.join(['%s'] * len(values))})")
                params.extend(values)
            elif value is None:
                clauses.append(f"{col} IS NULL")
            else:
                clauses.append(f"{col}=%s")
                params.append(value)
        return " WHERE " + " AND ".join(clauses), params

    def _run(self, table: str, operation: str, fn):
        try:
            return fn()
        except mysql.connector.Error as e:
            logger.error("db.%s.%s failed: %s", table, operation, e)
            if getattr(e, "errno", None) == errorcode.ER_DUP_ENTRY:
                raise UniqueViolation(str(e.msg or e), table=table, operation=operation) from e
            raise StoreError(str(getattr(e, "msg", None) or e), table=table, operation=operation) from e

    # -- contract ------------------------------------------------------------

    def select_one(self, table: str, filters: Mapping[str, Any]) -> Optional[Record]:
        where, params = self._where(table, filters)

        def _do():
            with self._cursor() as cur:
                cur.execute(f"SELECT * FROM {_quote(table)}{where} LIMIT 1", tuple(params))
                row = cur.fetchone()
                return _normalize_row(row) if row else None

        row = self._run(table, "select", _do)
        logger.debug("db.%s.select_one filters=%s found=%s", table, dict(filters), row is not None)
        return row

    def select_many(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        joins: Sequence[Join] = (),
        order_by: Sequence[OrderBy] = (),
    ) -> list[Record]:
        base_cols = columns_for(table)
        select_parts = [f"t.{_quote(c)} AS {_quote(c)}" for c in base_cols]
        join_sql: list[str] = []
        for i, join in enumerate(joins):
            self._check_columns(table, [join.foreign_key])
            alias = f"j{i}"
            for c in columns_for(join.table):
                select_parts.append(f"{alias}.{_quote(c)} AS {_quote(join.key + _JOIN_SEP + c)}")
            join_sql.append(
                f" LEFT JOIN {_quote(join.table)} {alias} ON {alias}.`id` = t.{_quote(join.foreign_key)}"
            )

        where, params = self._where(table, filters, alias="t")
        order_sql = ""
        if order_by:
            self._check_columns(table, [o.column for o in order_by])
            order_sql = " ORDER BY " + ", ".join(
                f"t.{_quote(o.column)} {'DESC' if o.descending else 'ASC'}" for o in order_by
            )

        sql = f"SELECT {', '.join(select_parts)} FROM {_quote(table)} t{''.join(join_sql)}{where}{order_sql}"

        def _do():
            with self._cursor() as cur:
                cur.execute(sql, tuple(params))
                return list(cur.fetchall() or [])

        rows = self._run(table, "select", _do)
        out = [self._nest(r, joins) for r in rows]
        logger.debug("db.%s.select_many filters=%s count=%d", table, dict(filters or {}), len(out))
        return out

    @staticmethod
    def _nest(row: Mapping[str, Any], joins: Sequence[Join]) -> Record:
        base: Record = {}
        nested: dict[str, Record] = {j.key: {} for j in joins}
        for key, value in row.items():
            if _JOIN_SEP in key:
                alias, column = key.split(_JOIN_SEP, 1)
                nested.setdefault(alias, {})[column] = value
            else:
                base[key] = value
        base = _normalize_row(base)
        for alias, values in nested.items():
            base[alias] = _normalize_row(values) if values.get("id") is not None else None
        return base

    def insert(self, table: str, record: Mapping[str, Any]) -> Record:
        data = dict(record)
        data.setdefault("id", str(uuid.uuid4()))
        self._check_columns(table, list(data))
        cols = list(data)

        def _do():
            with self._cursor() as cur:
                cur.execute(
                    f"INSERT INTO {_quote(table)} ({', '.join(_quote(c) for c in cols)}) "
                    f"VALUES ({', '.join(['%s'] * len(cols))})",
                    tuple(data[c] for c in cols),
                )

        self._run(table, "insert", _do)
        logger.info("db.%s.insert id=%s", table, data["id"])
        return self.select_one(table, {"id": data["id"]}) or data

    def update(self, table: str, filters: Mapping[str, Any], patch: Mapping[str, Any]) -> Optional[Record]:
        if not patch:
            raise StoreError("Data required for update operation", table=table, operation="update")
        self._check_columns(table, list(patch))
        where, params = self._where(table, filters)
        assignments = ", ".join(f"{_quote(c)}=%s" for c in patch)

        def _do():
            with self._cursor() as cur:
                cur.execute(f"UPDATE {_quote(table)} SET {assignments}{where}", tuple(patch.values()) + tuple(params))
                return cur.rowcount

        count = self._run(table, "update", _do)
        logger.info("db.%s.update filters=%s rows=%s", table, dict(filters), count)
        # Re-read using the (possibly patched) filter values.
        lookup = {k: patch.get(k, v) for k, v in filters.items()}
        return self.select_one(table, lookup)

    def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        if not filters:
            raise StoreError("Refusing to delete without filters", table=table, operation="delete")
        where, params = self._where(table, filters)

        def _do():
            with self._cursor() as cur:
                cur.execute(f"DELETE FROM {_quote(table)}{where}", tuple(params))
                return int(cur.rowcount)

        count = self._run(table, "delete", _do)
        logger.info("db.%s.delete filters=%s rows=%d", table, dict(filters), count)
        return count

    def upsert(self, table: str, record: Mapping[str, Any], conflict_key: str = "id") -> Record:
        data = dict(record)
        if conflict_key == "id":
            data.setdefault("id", str(uuid.uuid4()))
        if conflict_key not in data:
            raise StoreError(f"Upsert needs a value for {conflict_key}", table=table, operation="upsert")
        self._check_columns(table, list(data))
        cols = list(data)
        updates = [c for c in cols if c not in {"id", conflict_key}] or [conflict_key]

        def _do():
            with self._cursor() as cur:
                cur.execute(
                    f"INSERT INTO {_quote(table)} ({', '.join(_quote(c) for c in cols)}) "
                    f"VALUES ({', '.join(['%s'] * len(cols))}) "
                    f"ON DUPLICATE KEY UPDATE {', '.join(f'{_quote(c)}=VALUES({_quote(c)})' for c in updates)}",
                    tuple(data[c] for c in cols),
                )

        self._run(table, "upsert", _do)
        logger.info("db.%s.upsert %s=%s", table, conflict_key, data[conflict_key])
        return self.select_one(table, {conflict_key: data[conflict_key]}) or data
