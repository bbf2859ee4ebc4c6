"""
Process-wide interceptor chain.

Installed once at startup, before the first query call, and frozen.
"""
from __future__ import annotations

import structlog

from .errors import ChainFrozenError
from .middleware.chain import InterceptorChain
from .middleware.logging_interceptor import QueryLoggingInterceptor
from .services.page_interceptor import PageInterceptor

logger = structlog.get_logger("pager.bootstrap")

_default_chain: InterceptorChain | None = None


def build_default_chain() -> InterceptorChain:
    """Logging first so it times the whole call, including the count query."""
    return InterceptorChain([QueryLoggingInterceptor(), PageInterceptor()]).freeze()


def install_default_chain(chain: InterceptorChain | None = None) -> InterceptorChain:
    """Install the process-wide chain. May only be called once."""
    global _default_chain
    if _default_chain is not None:
        raise ChainFrozenError("Default interceptor chain is already installed")
    chain = chain if chain is not None else build_default_chain()
    if not chain.frozen:
        chain.freeze()
    _default_chain = chain
    logger.info("chain_installed", order=chain.visualize())
    return chain


def get_default_chain() -> InterceptorChain:
    """Return the installed chain, installing the default one on first use."""
    if _default_chain is None:
        return install_default_chain()
    return _default_chain
