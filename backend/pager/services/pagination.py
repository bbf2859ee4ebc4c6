"""
Pagination utilities for direct, registry-free use.

Standardizes the paginated response envelope for callers that hold a
connection and a statement rather than a QuerySession.
"""
from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any, Callable

from ..channel import SQLiteChannel
from ..middleware.chain import Invocation, execute_invocation
from ..models.common import PaginationMeta
from ..models.page import PageRequest
from .page_interceptor import PageInterceptor


@dataclass
class PaginatedResult:
    """Standard paginated response matching the API envelope format."""
    data: list = field(default_factory=list)
    pagination: PaginationMeta | None = None


def paginate_query(
    conn: sqlite3.Connection,
    sql: str,
    page: PageRequest,
    params: list[Any] | tuple | dict[str, Any] = (),
    row_mapper: Callable[[sqlite3.Row], Any] | None = None,
) -> PaginatedResult:
    """
    Execute count + data query and return a PaginatedResult.

    Args:
        conn: SQLite connection (rows must support dict(row), e.g. sqlite3.Row)
        sql: Plain SELECT without LIMIT/OFFSET
        page: Page request; filled in with totals on success
        params: Positional (sequence) or named (dict) statement parameters
        row_mapper: Optional function to transform each Row.
                    If None, uses dict(row).

    Returns:
        PaginatedResult with data and pagination metadata
    """
    if isinstance(params, dict):
        invocation = Invocation("paginate_query", sql, SQLiteChannel(conn), (page,), dict(params))
    else:
        invocation = Invocation("paginate_query", sql, SQLiteChannel(conn), (*params, page))

    rows = PageInterceptor()(invocation, execute_invocation)

    mapper = row_mapper or (lambda row: dict(row))
    return PaginatedResult(
        data=[mapper(row) for row in rows],
        pagination=PaginationMeta.create(page.page_index, page.page_size, page.total_count),
    )
