"""Back-office Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field

from campus_forum.services.stats import StatsPeriod

from .common import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=50)
    description: str | None = None
    icon: str | None = Field(None, max_length=100)
    sort_order: int = 0
    is_anonymous: bool = False


class CategoryUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=50)
    description: str | None = None
    icon: str | None = Field(None, max_length=100)
    sort_order: int | None = None
    is_anonymous: bool | None = None


class CategoryReorder(CamelModel):
    category_ids: list[int] = Field(..., min_length=1)


class AdminLogOut(CamelModel):
    id: int
    admin_id: int
    action: str
    target_type: str
    target_id: int | None = None
    description: str | None = None
    created_at: datetime


class CascadeOut(CamelModel):
    posts: int
    comments: int
    likes: int
    favorites: int


class OverviewOut(CamelModel):
    total_users: int
    active_users: int
    banned_users: int
    pending_reviews: int
    total_posts: int
    today_posts: int
    total_comments: int
    today_comments: int
    total_categories: int
    total_resources: int


class DailyCountOut(CamelModel):
    date: str
    count: int


class TrendOut(CamelModel):
    period: StatsPeriod
    trends: list[DailyCountOut]
    total: int


class CategoryFigureOut(CamelModel):
    id: int
    name: str
    post_count: int


class CategoryBreakdownOut(CamelModel):
    categories: list[CategoryFigureOut]
    total: int
