"""
Interceptor chain for logical query calls.

Every call passes through an ordered list of interceptors before reaching
the terminal executor. Each interceptor is a callable
``(invocation, call_next) -> rows`` that may inspect or replace the
invocation and must return the rows produced further down the chain.

The chain is configured once at startup and frozen; see pager.bootstrap.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

import structlog

from ..errors import ChainFrozenError
from ..models.page import StatementDescriptor

logger = structlog.get_logger("pager.chain")


@dataclass(frozen=True)
class Invocation:
    """One logical query call: operation name, SQL template, call arguments."""

    operation: str
    sql: str
    channel: Any
    args: tuple = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def replace(self, **changes: Any) -> Invocation:
        return dataclasses.replace(self, **changes)

    def descriptor(self) -> StatementDescriptor:
        return StatementDescriptor.from_call(self.sql, self.args, self.kwargs)


CallNext = Callable[[Invocation], list]
Interceptor = Callable[[Invocation, CallNext], list]


def execute_invocation(invocation: Invocation) -> list:
    """Terminal executor: run the statement as-is through the channel."""
    descriptor = invocation.descriptor()
    return invocation.channel.fetch_all(descriptor.sql, descriptor.params)


class InterceptorChain:
    """Ordered interceptors, in LOGICAL execution order (outermost first)."""

    def __init__(self, interceptors: Iterable[Interceptor] = ()):
        self._interceptors: list[Interceptor] = list(interceptors)
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(self, interceptor: Interceptor) -> InterceptorChain:
        """Append an interceptor. Only allowed before freeze()."""
        if self._frozen:
            raise ChainFrozenError(
                "Interceptor chain is frozen; register interceptors at startup",
                details={"interceptor": _name(interceptor)},
            )
        self._interceptors.append(interceptor)
        return self

    def freeze(self) -> InterceptorChain:
        self._frozen = True
        logger.debug("chain_frozen", order=self.visualize())
        return self

    def __len__(self) -> int:
        return len(self._interceptors)

    def __call__(self, invocation: Invocation, terminal: CallNext = execute_invocation) -> list:
        interceptors = tuple(self._interceptors)

        def dispatch(index: int, current: Invocation) -> list:
            if index == len(interceptors):
                return terminal(current)
            return interceptors[index](current, lambda nxt: dispatch(index + 1, nxt))

        return dispatch(0, invocation)

    def visualize(self) -> str:
        """Return the execution order, e.g. "QueryLoggingInterceptor → PageInterceptor"."""
        return " → ".join(_name(i) for i in self._interceptors)


def _name(interceptor: Interceptor) -> str:
    return getattr(interceptor, "__name__", type(interceptor).__name__)
