"""Interceptor chain, query logging and error handlers."""
from .chain import InterceptorChain, Invocation, execute_invocation
from .logging_interceptor import QueryLoggingInterceptor
from .error_handler import register_error_handlers

__all__ = [
    "InterceptorChain",
    "Invocation",
    "execute_invocation",
    "QueryLoggingInterceptor",
    "register_error_handlers",
]
