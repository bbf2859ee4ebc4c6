"""
Query rewriting engine.

Classifies calls, derives count statements, bounds the main statement
and orchestrates both through the PageInterceptor.
"""
from .sql_scanner import SelectStatement, parse_select
from .classifier import find_page_request, strip_page_requests
from .count_query import derive_count_statement
from .bounded_query import bound_statement
from .page_interceptor import PageInterceptor
from .pagination import paginate_query, PaginatedResult

__all__ = [
    "SelectStatement",
    "parse_select",
    "find_page_request",
    "strip_page_requests",
    "derive_count_statement",
    "bound_statement",
    "PageInterceptor",
    "paginate_query",
    "PaginatedResult",
]
