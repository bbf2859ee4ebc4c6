"""Page request and statement descriptor models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..errors import ParameterBindingError


def compute_total_pages(total_count: int, page_size: int) -> int:
    """Ceiling division of total_count by page_size; 0 when page_size is 0."""
    if page_size <= 0:
        return 0
    return (total_count + page_size - 1) // page_size


class PageRequest(BaseModel):
    """Caller-owned page request, filled in with totals by the engine.

    A PageRequest is mutated in place during a call. Do not pass the same
    instance into two overlapping calls.
    """

    model_config = ConfigDict(validate_assignment=True)

    page_size: int = Field(..., ge=0, description="Rows per page")
    page_index: int = Field(0, ge=0, description="Page number (0-indexed)")
    full: bool = Field(False, description="Return every row, still computing totals")
    total_count: int = Field(0, ge=0, description="Rows matching the filter (engine-set)")
    total_page: int = Field(0, ge=0, description="Number of pages (engine-set)")

    @property
    def offset(self) -> int:
        return self.page_index * self.page_size

    def commit_totals(self, total_count: int) -> None:
        """Write the count result and derived page total."""
        self.total_count = total_count
        self.total_page = compute_total_pages(total_count, self.page_size)


@dataclass(frozen=True)
class StatementDescriptor:
    """SQL text plus the parameters bound to it for one call."""

    sql: str
    params: list[Any] | dict[str, Any] = field(default_factory=list)

    @classmethod
    def from_call(cls, sql: str, args: tuple, kwargs: dict) -> StatementDescriptor:
        """Bind positional args as qmark params or kwargs as named params."""
        if args and kwargs:
            raise ParameterBindingError(
                "Cannot bind positional and named parameters in the same call",
                details={"positional": len(args), "named": sorted(kwargs)},
            )
        if kwargs:
            return cls(sql, dict(kwargs))
        return cls(sql, list(args))
