# Pydantic models for page requests and paginated responses
from .page import PageRequest, StatementDescriptor, compute_total_pages
from .common import PaginationMeta, PaginatedResponse

__all__ = [
    "PageRequest",
    "StatementDescriptor",
    "compute_total_pages",
    "PaginationMeta",
    "PaginatedResponse",
]
