# src/campus_forum/services/pagination.py
"""Offset pagination helpers shared by list services."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.orm import Query

from campus_forum.core.settings import settings

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the totals needed to render pagination."""

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


def clamp_page(page: int | None, limit: int | None) -> tuple[int, int]:
    """Normalise page/limit into ``(page >= 1, 1 <= limit <= MAX_PAGE_SIZE)``."""
    page = max(page or 1, 1)
    limit = limit or settings.default_page_size
    limit = max(1, min(limit, settings.max_page_size))
    return page, limit


def paginate(query: Query, page: int | None, limit: int | None) -> Page:
    """Count ``query`` and fetch the requested slice."""
    page, limit = clamp_page(page, limit)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return Page(items=items, total=total, page=page, limit=limit)
