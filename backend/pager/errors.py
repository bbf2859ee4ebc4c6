"""
Error taxonomy for the pagination layer.

Every failure aborts the whole call and surfaces to the caller.
Nothing here is retried by the engine.
"""
from __future__ import annotations


class PagerError(Exception):
    """Base class for pagination-layer errors."""
    status_code: int = 500
    error_code: str = "PAGER_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AmbiguousPagerError(PagerError):
    """More than one PageRequest bound to a single call."""
    error_code = "AMBIGUOUS_PAGER"


class ParameterBindingError(PagerError):
    """Call mixes positional and named statement parameters."""
    error_code = "INVALID_BINDING"


class UnsupportedStatementError(PagerError):
    """Statement shape cannot be counted or bounded safely."""
    error_code = "UNSUPPORTED_STATEMENT"


class AlreadyBoundedError(PagerError):
    """Statement already carries a row-limiting clause."""
    error_code = "ALREADY_BOUNDED"


class ExecutionError(PagerError):
    """The execution channel failed while running a statement."""
    status_code = 503
    error_code = "EXECUTION_FAILED"


class CountExecutionError(ExecutionError):
    """The execution channel failed while running the count statement."""
    error_code = "COUNT_FAILED"


class StatementNotFoundError(PagerError):
    """No statement registered under the requested operation name."""
    error_code = "STATEMENT_NOT_FOUND"


class RegistryError(PagerError):
    """Statement registry source is malformed."""
    error_code = "INVALID_REGISTRY"


class ChainFrozenError(PagerError):
    """Interceptor chain modified after startup."""
    error_code = "CHAIN_FROZEN"
