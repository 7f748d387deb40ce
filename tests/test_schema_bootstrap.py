from __future__ import annotations

import re

from src.kajian_attendance.kajian_attendance.database.bootstrap import DEFAULT_SCHEMA_PATH, iter_sql_statements
from src.kajian_attendance.kajian_attendance.database.tables import COLUMNS


def test_splitter_ignores_semicolons_in_quotes_and_comments():
    sql = """
    -- comment; with semicolon
    INSERT INTO t VALUES ('a;b', "c;d");
    SELECT 1
    """

    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES ('a;b', \"c;d\")", "SELECT 1"]


def test_schema_creates_every_registered_table():
    statements = list(iter_sql_statements(DEFAULT_SCHEMA_PATH.read_text(encoding="utf-8")))
    created = set()
    for statement in statements:
        match = re.search(r"CREATE TABLE IF NOT EXISTS\s+(\w+)", statement)
        if match:
            created.add(match.group(1))

    assert created == set(COLUMNS)


def test_attendance_pair_is_unique_in_schema():
    schema = DEFAULT_SCHEMA_PATH.read_text(encoding="utf-8")

    assert re.search(r"UNIQUE KEY \w+ \(participant_id, session_id\)", schema)
