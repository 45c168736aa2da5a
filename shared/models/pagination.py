from typing import Generic, TypeVar

from pydantic import Field

from shared.models.base import CamelModel

T = TypeVar("T")


class PaginationParams(CamelModel):
    """Query params for list endpoints."""

    page: int = Field(default=1, ge=1, le=1000, description="Page number")
    page_size: int = Field(default=20, ge=1, le=100, description="Items per page")

    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def limit(self) -> int:
        return self.page_size


class PaginatedResponse(CamelModel, Generic[T]):
    """Wrapped list with total and pagination metadata."""

    items: list[T]
    total: int
    page: int
    page_size: int
    has_more: bool
