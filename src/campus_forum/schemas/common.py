"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from campus_forum.services.pagination import Page

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[DataT]):
    """Success envelope returned by every endpoint."""

    success: bool = True
    data: DataT | None = None
    message: str | None = None


class ErrorBody(CamelModel):
    code: str = Field(..., description="Stable machine-readable error code")
    message: str = Field(..., description="Human-readable explanation")
    details: Any | None = None


class ErrorResponse(CamelModel):
    """Error envelope produced by the exception handlers."""

    success: bool = False
    error: ErrorBody


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def from_page(cls, page: Page) -> Pagination:
        return cls(page=page.page, limit=page.limit, total=page.total, total_pages=page.total_pages)


class PageOut(CamelModel, Generic[DataT]):
    """A page of items plus pagination metadata."""

    items: list[DataT]
    pagination: Pagination
