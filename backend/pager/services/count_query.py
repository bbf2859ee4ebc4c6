"""
Count statement derivation.

Turns a pageable SELECT into a COUNT(*) over the same source and filter.
When replacing the projection could change the row count (DISTINCT,
GROUP BY, any function call in the projection) the original body is
wrapped in a subquery instead, so the count is never approximated.
"""
from __future__ import annotations

import structlog

from ..errors import UnsupportedStatementError
from .sql_scanner import SelectStatement, parse_select

logger = structlog.get_logger("pager.services.count")

COUNT_ALIAS = "pager_count"


def derive_count_statement(sql: str | SelectStatement) -> str:
    """Build a COUNT(*) statement matching the rows of `sql`.

    ORDER BY and LIMIT/OFFSET/FETCH tails are stripped; they do not
    affect how many rows match the filter.

    Raises:
        UnsupportedStatementError: if the statement shape is not recognised,
            or if stripping the tail would drop bound placeholders.
    """
    stmt = sql if isinstance(sql, SelectStatement) else parse_select(sql)

    if stmt.tail_has_params:
        raise UnsupportedStatementError(
            "Placeholders in ORDER BY or LIMIT clauses cannot be counted; "
            "bind them inside the filter or paginate manually",
        )

    if stmt.needs_wrap:
        # If GROUP BY etc. is used, we need to count the result rows
        logger.debug(
            "count_wrapped",
            reasons=list(stmt.wrap_reasons),
            projection_params=stmt.projection_has_params,
        )
        return f"SELECT COUNT(*) FROM ({stmt.body}\n) AS {COUNT_ALIAS}"

    return f"SELECT COUNT(*) {stmt.source}"
