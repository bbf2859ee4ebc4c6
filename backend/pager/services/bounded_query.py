"""Row-limiting rewrite for pageable SELECT statements."""
from __future__ import annotations

from ..errors import AlreadyBoundedError
from .sql_scanner import SelectStatement, parse_select


def _check_bound(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def bound_statement(sql: str | SelectStatement, page_size: int, offset: int = 0) -> str:
    """Append LIMIT/OFFSET so the statement returns at most `page_size` rows.

    Limit and offset are validated ints rendered as literals, which keeps the
    result valid for both qmark and named parameter styles.

    Args:
        sql: SELECT statement text, or an already parsed statement
        page_size: Maximum rows to return
        offset: Rows to skip (page_index * page_size)

    Raises:
        AlreadyBoundedError: if the statement already has LIMIT/OFFSET/FETCH
        UnsupportedStatementError: if the statement shape is not recognised
    """
    _check_bound("page_size", page_size)
    _check_bound("offset", offset)

    stmt = sql if isinstance(sql, SelectStatement) else parse_select(sql)
    if stmt.bounded:
        raise AlreadyBoundedError(
            "Statement already carries a row-limiting clause",
            details={"sql": stmt.text},
        )

    return f"{stmt.text}\nLIMIT {page_size} OFFSET {offset}"
