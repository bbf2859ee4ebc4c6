"""
Execution channel over a sqlite3 connection.

The pagination engine only needs three things from the database:
a scalar query, a row query and (optionally) a read snapshot that keeps
the count and the page consistent with each other.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Any, Generator, Protocol

import structlog

from .errors import ExecutionError

logger = structlog.get_logger("pager.channel")


class ExecutionChannel(Protocol):
    def fetch_scalar(self, sql: str, params: list[Any] | dict[str, Any] = ()) -> Any: ...

    def fetch_all(self, sql: str, params: list[Any] | dict[str, Any] = ()) -> list: ...

    def snapshot(self): ...


class SQLiteChannel:
    """Runs statements on a caller-owned sqlite3 connection.

    The connection is not opened, committed or closed here.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def _execute(self, sql: str, params: list[Any] | dict[str, Any] | tuple) -> sqlite3.Cursor:
        cursor = self.conn.cursor()
        try:
            cursor.execute(sql, params)
        except sqlite3.Error as exc:
            logger.warning(
                "statement_failed",
                error=str(exc),
                error_type=type(exc).__name__,
                sql=sql,
            )
            raise ExecutionError(
                f"Statement execution failed: {exc}",
                details={"sql": sql},
            ) from exc
        return cursor

    def fetch_scalar(self, sql: str, params: list[Any] | dict[str, Any] | tuple = ()) -> Any:
        """Execute a query expecting a single value."""
        row = self._execute(sql, params).fetchone()
        return row[0] if row is not None else None

    def fetch_all(self, sql: str, params: list[Any] | dict[str, Any] | tuple = ()) -> list:
        """Execute a statement; rows for queries, [] for writes."""
        cursor = self._execute(sql, params)
        if cursor.description is None:
            return []
        return cursor.fetchall()

    @contextmanager
    def snapshot(self) -> Generator[None, None, None]:
        """Run the enclosed reads inside one read transaction.

        Joins the caller's transaction if one is already open.
        """
        if self.conn.in_transaction:
            yield
            return

        self.conn.execute("BEGIN")
        try:
            yield
        except BaseException:
            self.conn.rollback()
            raise
        else:
            self.conn.commit()
