"""Response and result models for Canvas REST traffic."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PageResponse(BaseModel):
    """One HTTP response from a single GET.

    Header names are lower-cased so lookups do not depend on server casing.
    """

    status_code: int
    body: Any = None
    headers: dict[str, str] = Field(default_factory=dict)
    url: str

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    @property
    def link_header(self) -> str | None:
        return self.headers.get("link")

    def items(self) -> list[Any]:
        """Body as a sequence: arrays pass through, a bare object becomes one item."""
        if isinstance(self.body, list):
            return list(self.body)
        return [self.body]


class PaginationStats(BaseModel):
    """Telemetry for a completed traversal."""

    total_pages: int = Field(..., ge=0, alias="totalPages")
    total_items: int = Field(..., ge=0, alias="totalItems")
    duration_ms: float = Field(..., ge=0, alias="duration")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PaginationProgress(BaseModel):
    """How far a traversal got before it failed."""

    pages_fetched: int = Field(..., ge=0, alias="pagesFetched")
    items_fetched: int = Field(..., ge=0, alias="itemsFetched")
    duration_ms: float = Field(..., ge=0, alias="duration")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class PaginatedResult(BaseModel):
    """Every item gathered across all pages of one logical request, in order."""

    status_code: int = 200
    data: tuple[Any, ...]
    pagination: PaginationStats

    model_config = ConfigDict(frozen=True)

    def __len__(self) -> int:
        return len(self.data)

    def first(self) -> Any:
        """First item, or None for an empty result."""
        return self.data[0] if self.data else None

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready body with camelCase pagination keys."""
        return {
            "statusCode": self.status_code,
            "data": list(self.data),
            "pagination": self.pagination.model_dump(by_alias=True),
        }


class MutationResult(BaseModel):
    """Outcome of a single non-GET request."""

    status_code: int
    data: Any = None

    model_config = ConfigDict(frozen=True)
