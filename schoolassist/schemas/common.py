"""
Base schema and page-based pagination schemas.
"""

from __future__ import annotations

from datetime import datetime
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

from schoolassist.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE

T = TypeVar("T")

__all__ = [
    "BaseSchema",
    "TimestampMixin",
    "PaginationParams",
    "PaginationMeta",
    "PaginatedResponse",
]


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    Records returned by services inherit from this; ``model_dump(mode="json")``
    renders dates and datetimes as ISO-8601 strings and enums as their values.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=False,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class TimestampMixin(BaseModel):
    """Mixin for timestamp fields."""

    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class PaginationParams(BaseSchema):
    """Normalized pagination parameters."""

    page: int = Field(default=DEFAULT_PAGE, ge=1, description="Page number (1-indexed)")
    limit: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, description="Items per page")

    @computed_field  # type: ignore[misc]
    @property
    def offset(self) -> int:
        """Calculate offset for database queries."""
        return (self.page - 1) * self.limit


class PaginationMeta(BaseSchema):
    """Pagination metadata."""

    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of matching items")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    has_next: bool = Field(..., description="Has next page")
    has_previous: bool = Field(..., description="Has previous page")


class PaginatedResponse(BaseSchema, Generic[T]):
    """Generic paginated response."""

    items: List[T] = Field(..., description="List of items")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")

    @classmethod
    def create(
        cls,
        items: List[T],
        total: int,
        page: int,
        limit: int,
    ) -> "PaginatedResponse[T]":
        """
        Create paginated response with calculated metadata.

        ``total_pages`` is ``ceil(total / limit)``, so an empty result has
        zero pages.
        """
        total_pages = (total + limit - 1) // limit if limit > 0 else 0

        meta = PaginationMeta(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1,
        )
        return cls(items=items, pagination=meta)
