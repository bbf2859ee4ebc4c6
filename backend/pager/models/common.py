"""Common Pydantic models for pagination envelopes."""
from pydantic import BaseModel, Field
from typing import TypeVar, Generic, List

from .page import compute_total_pages

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata for list responses."""

    page: int = Field(..., description="Current page number (0-indexed)")
    per_page: int = Field(..., description="Items per page")
    total: int = Field(..., description="Total number of items")
    total_pages: int = Field(..., description="Total number of pages")

    @classmethod
    def create(cls, page: int, per_page: int, total: int) -> "PaginationMeta":
        """Create pagination metadata from parameters."""
        return cls(
            page=page,
            per_page=per_page,
            total=total,
            total_pages=compute_total_pages(total, per_page),
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response wrapper."""

    data: List[T]
    pagination: PaginationMeta
