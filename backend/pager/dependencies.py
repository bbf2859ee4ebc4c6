"""Database connection and session helpers."""
import sqlite3
from contextlib import contextmanager
from typing import Generator

from .channel import SQLiteChannel
from .config.settings import DATABASE_PATH, DB_TIMEOUT
from .registry import StatementRegistry
from .session import QuerySession


def get_db_connection(path: str | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory and timeout.

    Default path and timeout come from PAGER_DATABASE_PATH and
    PAGER_DB_TIMEOUT.
    """
    conn = sqlite3.connect(path or str(DATABASE_PATH), timeout=DB_TIMEOUT)
    conn.row_factory = sqlite3.Row
    # Set busy timeout to handle concurrent access
    conn.execute(f"PRAGMA busy_timeout = {DB_TIMEOUT * 1000}")
    # WAL gives each read transaction a stable snapshot while writers proceed
    conn.execute("PRAGMA journal_mode = WAL")
    return conn


@contextmanager
def get_db(path: str | None = None) -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections."""
    conn = get_db_connection(path)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def open_session(
    registry: StatementRegistry,
    path: str | None = None,
) -> Generator[QuerySession, None, None]:
    """Open a connection and yield a QuerySession bound to it."""
    with get_db(path) as conn:
        yield QuerySession(SQLiteChannel(conn), registry)
