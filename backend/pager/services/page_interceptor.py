"""
PageInterceptor: transparent pagination for logical query calls.

Per call:  Received -> Classified -> PassThrough
                                 -> Counting -> Bounding -> Executed -> Returned

A call is pageable when exactly one of its arguments is a PageRequest.
The interceptor then runs a derived COUNT(*) statement, rewrites the
original statement with LIMIT/OFFSET (unless the request is `full`),
runs it further down the chain and writes the totals back into the
PageRequest.

Totals are committed only after both statements succeed, so a failed
call leaves the caller's PageRequest untouched.
"""
from __future__ import annotations

import structlog

from ..errors import CountExecutionError, ExecutionError
from ..middleware.chain import CallNext, Invocation
from .bounded_query import bound_statement
from .classifier import find_page_request, strip_page_requests
from .count_query import derive_count_statement
from .sql_scanner import parse_select

logger = structlog.get_logger("pager.services.page")


class PageInterceptor:
    """Interceptor that paginates calls carrying a PageRequest."""

    def __call__(self, invocation: Invocation, call_next: CallNext) -> list:
        log = logger.bind(operation=invocation.operation)

        page = find_page_request(invocation.args, invocation.kwargs)
        if page is None:
            log.debug("pass_through")
            return call_next(invocation)

        args, kwargs = strip_page_requests(invocation.args, invocation.kwargs)
        plain = invocation.replace(args=args, kwargs=kwargs)
        descriptor = plain.descriptor()
        statement = parse_select(descriptor.sql)
        channel = invocation.channel

        # Count and page must observe the same snapshot
        with channel.snapshot():
            count_sql = derive_count_statement(statement)
            try:
                total = channel.fetch_scalar(count_sql, descriptor.params)
            except ExecutionError as exc:
                raise CountExecutionError(
                    f"Count query failed: {exc.message}",
                    details={"operation": invocation.operation, "sql": count_sql},
                ) from exc
            total_count = int(total or 0)
            log.debug("count_executed", total_count=total_count)

            if page.full:
                bounded = plain
            else:
                bounded = plain.replace(
                    sql=bound_statement(statement, page.page_size, page.offset)
                )
            rows = call_next(bounded)

        page.commit_totals(total_count)
        log.debug(
            "page_executed",
            page_index=page.page_index,
            page_size=page.page_size,
            full=page.full,
            rows=len(rows),
            total_count=page.total_count,
            total_page=page.total_page,
        )
        return rows
