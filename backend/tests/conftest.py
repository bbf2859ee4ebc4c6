"""
Pytest fixtures for pager tests.

Every test gets a fresh in-memory sqlite database with a t_user table
seeded with 20 rows (ids 0-19).
"""
import sqlite3

import pytest

from pager import bootstrap
from pager.bootstrap import build_default_chain
from pager.channel import SQLiteChannel
from pager.registry import StatementRegistry
from pager.session import QuerySession

USER_COUNT = 20

STATEMENTS = {
    "users": {
        "pageable": "select * from t_user",
        "ordered": "SELECT id, name, age, address FROM t_user ORDER BY id",
        "by_age": "SELECT id, name FROM t_user WHERE age = ? ORDER BY id",
        "by_address": "SELECT id, name FROM t_user WHERE address = :address ORDER BY id",
        "first_five": "SELECT * FROM t_user ORDER BY id LIMIT 5",
        "ages": "SELECT DISTINCT age FROM t_user",
        "age_total": "SELECT age_total(age) AS total FROM t_user",
        "missing_table": "SELECT * FROM t_missing",
        "save": "insert into t_user (id, name, age, address) values (:id, :name, :age, :address);",
        "delete_all": "delete from t_user",
    },
}


class AgeTotal:
    """Custom sqlite aggregate, unknown to the engine by name."""

    def __init__(self):
        self.total = 0

    def step(self, value):
        self.total += value

    def finalize(self):
        return self.total


class RecordingChannel(SQLiteChannel):
    """SQLiteChannel that remembers every statement it runs."""

    def __init__(self, conn):
        super().__init__(conn)
        self.statements = []

    def fetch_scalar(self, sql, params=()):
        self.statements.append(sql)
        return super().fetch_scalar(sql, params)

    def fetch_all(self, sql, params=()):
        self.statements.append(sql)
        return super().fetch_all(sql, params)


def _create_users(conn, count):
    conn.execute(
        "CREATE TABLE t_user (id INTEGER PRIMARY KEY, name TEXT, age INTEGER, address TEXT)"
    )
    conn.executemany(
        "INSERT INTO t_user (id, name, age, address) VALUES (?, ?, ?, ?)",
        [(i, f"Liu Bei [{i}]", 11, "Shu") for i in range(count)],
    )
    conn.commit()


@pytest.fixture
def conn():
    """In-memory database with 20 users."""
    connection = sqlite3.connect(":memory:", check_same_thread=False)
    connection.row_factory = sqlite3.Row
    _create_users(connection, USER_COUNT)
    yield connection
    connection.close()


@pytest.fixture
def empty_conn():
    """In-memory database with an empty t_user table."""
    connection = sqlite3.connect(":memory:", check_same_thread=False)
    connection.row_factory = sqlite3.Row
    _create_users(connection, 0)
    yield connection
    connection.close()


@pytest.fixture
def registry():
    return StatementRegistry.from_mapping(STATEMENTS)


@pytest.fixture
def channel(conn):
    return RecordingChannel(conn)


@pytest.fixture
def session(channel, registry):
    """Session over the seeded database with its own frozen chain."""
    return QuerySession(channel, registry, chain=build_default_chain())


@pytest.fixture(autouse=True)
def reset_default_chain(monkeypatch):
    """Keep the process-wide chain from leaking between tests."""
    monkeypatch.setattr(bootstrap, "_default_chain", None)
