"""Data models for Canvas REST traffic.

All models are Pydantic v2 and frozen, so results handed back to callers
cannot be modified after the fact.
"""

from .page import (
    MutationResult,
    PageResponse,
    PaginatedResult,
    PaginationProgress,
    PaginationStats,
)

__all__ = [
    "MutationResult",
    "PageResponse",
    "PaginatedResult",
    "PaginationProgress",
    "PaginationStats",
]
