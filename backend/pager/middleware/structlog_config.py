"""
Structlog configuration for the pager package.

Outputs JSON-formatted structured logs to stdout, or a console renderer
when attached to a TTY. SQL text attached to log events is folded onto
one line and clipped to PAGER_LOG_SQL_CHARS. Parameter values are never
logged by the engine.

Call configure() once at application startup; the library itself never
configures logging on import.
"""
import logging
import re
import sys

import structlog

from ..config.settings import LOG_LEVEL, LOG_SQL_CHARS

_WHITESPACE = re.compile(r"\s+")

SQL_FIELDS = ("sql", "count_sql")


def compact_sql(max_chars: int = LOG_SQL_CHARS):
    """Build a processor folding SQL fields of an event onto one clipped line."""

    def processor(logger, method_name, event_dict):
        for field in SQL_FIELDS:
            value = event_dict.get(field)
            if not isinstance(value, str):
                continue
            value = _WHITESPACE.sub(" ", value).strip()
            if max_chars and len(value) > max_chars:
                value = value[:max_chars] + "..."
            event_dict[field] = value
        return event_dict

    return processor


def configure(log_level: str = LOG_LEVEL, json_logs: bool | None = None) -> None:
    """Configure structlog for structured query logging.

    Args:
        log_level: Root logger level name; unknown names fall back to INFO
        json_logs: Force JSON (True) or console (False) output.
                   If None, uses JSON unless stderr is a TTY.
    """
    if json_logs is None:
        json_logs = not sys.stderr.isatty()
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    # Foreign (stdlib) records get the same context and SQL folding
    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        compact_sql(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))
