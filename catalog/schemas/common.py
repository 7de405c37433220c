"""
Common schema types shared by every catalog screen.
"""

import math
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    code: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def from_validation_error(cls, exc: Any) -> "ErrorResponse":
        """Error payload for a BrowseValidationError; field names the facet."""
        return cls(
            detail=getattr(exc, "message", str(exc)),
            code="invalid_query",
            field=getattr(exc, "facet", None),
        )


class PaginationInfo(BaseModel):
    """Pagination block of the response envelope."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0, alias="totalPages")


class Page(BaseModel, Generic[T]):
    """One page of a filtered and sorted result set."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    items: List[T]
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1)
    total: int = Field(0, ge=0)
    total_pages: int = Field(0, ge=0)

    @classmethod
    def create(
        cls,
        items: List[T],
        total: int,
        page: int = 1,
        limit: int = 10,
    ) -> "Page[T]":
        return cls(
            items=items,
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if total else 0,
        )

    @property
    def has_more(self) -> bool:
        return (self.page * self.limit) < self.total

    @property
    def pagination(self) -> PaginationInfo:
        return PaginationInfo(
            page=self.page,
            limit=self.limit,
            total=self.total,
            total_pages=self.total_pages,
        )

    def to_envelope(self) -> Dict[str, Any]:
        """`{items, pagination: {page, limit, total, totalPages}}`."""
        return {
            "items": list(self.items),
            "pagination": self.pagination.model_dump(by_alias=True),
        }
