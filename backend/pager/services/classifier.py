"""Decide whether a call is pageable from its bound parameter values."""
from __future__ import annotations

from typing import Any

from ..errors import AmbiguousPagerError
from ..models.page import PageRequest


def find_page_request(args: tuple, kwargs: dict[str, Any]) -> PageRequest | None:
    """Return the single PageRequest among the call's parameters, if any.

    Raises:
        AmbiguousPagerError: if more than one PageRequest is bound.
    """
    found = [v for v in (*args, *kwargs.values()) if isinstance(v, PageRequest)]
    if len(found) > 1:
        raise AmbiguousPagerError(
            "A call may bind at most one PageRequest",
            details={"count": len(found)},
        )
    return found[0] if found else None


def strip_page_requests(args: tuple, kwargs: dict[str, Any]) -> tuple[tuple, dict[str, Any]]:
    """Drop PageRequest values, leaving the statement's ordinary bindings."""
    return (
        tuple(v for v in args if not isinstance(v, PageRequest)),
        {k: v for k, v in kwargs.items() if not isinstance(v, PageRequest)},
    )
