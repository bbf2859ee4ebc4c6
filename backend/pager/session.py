"""
QuerySession: the caller-facing entry point.

    session = QuerySession(SQLiteChannel(conn), registry)
    page = PageRequest(page_size=10)
    users = session.execute("users.pageable", page)
    page.total_count, page.total_page   # filled in by the engine

Every call is looked up in the statement registry and sent through the
interceptor chain; the row mapper, if given, is applied last.
"""
from __future__ import annotations

from typing import Any, Callable

from .bootstrap import get_default_chain
from .channel import ExecutionChannel
from .middleware.chain import InterceptorChain, Invocation, execute_invocation
from .registry import StatementRegistry


class QuerySession:
    """Runs registered operations on one execution channel."""

    def __init__(
        self,
        channel: ExecutionChannel,
        registry: StatementRegistry,
        chain: InterceptorChain | None = None,
    ):
        self.channel = channel
        self.registry = registry
        self.chain = chain if chain is not None else get_default_chain()

    def execute(
        self,
        operation: str,
        *args: Any,
        row_mapper: Callable[[Any], Any] | None = None,
        **kwargs: Any,
    ) -> list:
        """Run a registered operation and return its rows.

        Positional arguments bind to `?` placeholders, keyword arguments to
        `:name` placeholders. At most one argument may be a PageRequest;
        it is filled in with totals when the call succeeds. `row_mapper`
        is reserved and never bound as a statement parameter.
        """
        invocation = Invocation(
            operation=operation,
            sql=self.registry.statement(operation),
            channel=self.channel,
            args=args,
            kwargs=kwargs,
        )
        rows = self.chain(invocation, execute_invocation)
        if row_mapper is None:
            return rows
        return [row_mapper(row) for row in rows]
