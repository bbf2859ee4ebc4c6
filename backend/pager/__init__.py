# Pager: transparent SQL pagination
"""
Transparent pagination for registered SELECT statements.

Bind a PageRequest to a query call and get back one page of rows, with
total_count and total_page written into the request.
"""
from .errors import (
    PagerError,
    AmbiguousPagerError,
    ParameterBindingError,
    UnsupportedStatementError,
    AlreadyBoundedError,
    ExecutionError,
    CountExecutionError,
    StatementNotFoundError,
    RegistryError,
    ChainFrozenError,
)
from .models import PageRequest, PaginationMeta
from .channel import SQLiteChannel
from .registry import StatementRegistry, load_registry
from .session import QuerySession
from .services import paginate_query, PaginatedResult

__all__ = [
    "PagerError",
    "AmbiguousPagerError",
    "ParameterBindingError",
    "UnsupportedStatementError",
    "AlreadyBoundedError",
    "ExecutionError",
    "CountExecutionError",
    "StatementNotFoundError",
    "RegistryError",
    "ChainFrozenError",
    "PageRequest",
    "PaginationMeta",
    "SQLiteChannel",
    "StatementRegistry",
    "load_registry",
    "QuerySession",
    "paginate_query",
    "PaginatedResult",
]
