"""
Query logging interceptor with structured output.

Logs every logical query call with operation, row count and duration.
Warns on slow calls (>2000ms by default).
Binds a short call_id to the log context for the duration of the call.
"""
import time
import uuid

import structlog

from ..config.settings import SLOW_QUERY_MS
from .chain import CallNext, Invocation

logger = structlog.get_logger("pager.query")


class QueryLoggingInterceptor:
    """Log all query calls with timing and tracing."""

    def __init__(self, slow_threshold_ms: float = SLOW_QUERY_MS):
        self.slow_threshold_ms = slow_threshold_ms

    def __call__(self, invocation: Invocation, call_next: CallNext) -> list:
        call_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        with structlog.contextvars.bound_contextvars(
            call_id=call_id,
            operation=invocation.operation,
        ):
            try:
                rows = call_next(invocation)
            except Exception as exc:
                duration_ms = round((time.perf_counter() - start_time) * 1000, 1)
                logger.error(
                    "query_failed",
                    duration_ms=duration_ms,
                    error_type=type(exc).__name__,
                )
                raise

            duration_ms = round((time.perf_counter() - start_time) * 1000, 1)

            # Parameter values are never logged, only how many were bound
            log_data = {
                "duration_ms": duration_ms,
                "rows": len(rows),
                "params": len(invocation.args) + len(invocation.kwargs),
            }
            if duration_ms > self.slow_threshold_ms:
                logger.warning("slow_query", **log_data)
            else:
                logger.info("query_completed", **log_data)

        return rows
