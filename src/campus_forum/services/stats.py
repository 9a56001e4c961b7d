# src/campus_forum/services/stats.py
"""Read-only dashboard figures for the admin back-office."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from sqlalchemy import and_, func
from sqlalchemy.orm import Query, Session

from campus_forum.core.settings import settings
from campus_forum.db.time import utcnow
from campus_forum.models import Category, Comment, Post, Resource, ReviewStatus, User
from campus_forum.services.visibility import ViewerContext, scope_users


@dataclass(frozen=True)
class Overview:
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


def _start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def overview(db: Session, viewer: ViewerContext) -> Overview:
    """Compute the dashboard overview.

    User figures go through the admin-hierarchy scope, so an admin's totals
    never reveal how many super admins exist.
    """
    now = utcnow()
    today = _start_of_day(now)
    active_since = now - timedelta(days=settings.active_user_window_days)
    users = scope_users(db.query(User), viewer)

    return Overview(
        total_users=users.count(),
        active_users=users.filter(User.last_login_at >= active_since).count(),
        banned_users=users.filter(User.is_active.is_(False)).count(),
        pending_reviews=users.filter(User.review_status == ReviewStatus.PENDING.value).count(),
        total_posts=db.query(Post).filter(Post.is_deleted.is_(False)).count(),
        today_posts=db.query(Post).filter(Post.is_deleted.is_(False), Post.created_at >= today).count(),
        total_comments=db.query(Comment).filter(Comment.is_deleted.is_(False)).count(),
        today_comments=db.query(Comment).filter(Comment.is_deleted.is_(False), Comment.created_at >= today).count(),
        total_categories=db.query(Category).count(),
        total_resources=db.query(Resource).filter(Resource.is_deleted.is_(False)).count(),
    )


class StatsPeriod(str, Enum):
    """Look-back window for the trend figures."""

    WEEK = "7d"
    MONTH = "30d"
    ALL = "all"

    def start(self, now: datetime) -> datetime | None:
        if self is StatsPeriod.WEEK:
            return now - timedelta(days=7)
        if self is StatsPeriod.MONTH:
            return now - timedelta(days=30)
        return None


@dataclass(frozen=True)
class DailyCount:
    date: str
    count: int


@dataclass(frozen=True)
class Trend:
    period: StatsPeriod
    trends: list[DailyCount]
    total: int


def _daily_counts(created: list[datetime]) -> list[DailyCount]:
    buckets: dict[str, int] = {}
    for moment in sorted(created):
        day = moment.date().isoformat()
        buckets[day] = buckets.get(day, 0) + 1
    return [DailyCount(date=day, count=n) for day, n in buckets.items()]


def _trend(query: Query, column: Any, period: StatsPeriod) -> Trend:
    start = period.start(utcnow())
    if start is not None:
        query = query.filter(column >= start)
    created = [row[0] for row in query.with_entities(column).all()]
    return Trend(period=period, trends=_daily_counts(created), total=len(created))


def user_trend(db: Session, viewer: ViewerContext, period: StatsPeriod = StatsPeriod.MONTH) -> Trend:
    """Registrations per day; super admins are not counted for admins."""
    return _trend(scope_users(db.query(User), viewer), User.created_at, period)


def post_trend(db: Session, period: StatsPeriod = StatsPeriod.MONTH) -> Trend:
    """Live posts created per day."""
    return _trend(db.query(Post).filter(Post.is_deleted.is_(False)), Post.created_at, period)


@dataclass(frozen=True)
class CategoryFigure:
    id: int
    name: str
    post_count: int


def category_breakdown(db: Session) -> list[CategoryFigure]:
    """Live posts per category, recounted from the post table."""
    live_posts = func.count(Post.id)
    rows = (
        db.query(Category.id, Category.name, live_posts)
        .outerjoin(Post, and_(Post.category_id == Category.id, Post.is_deleted.is_(False)))
        .group_by(Category.id, Category.name, Category.sort_order)
        .order_by(Category.sort_order.asc(), Category.id.asc())
        .all()
    )
    return [CategoryFigure(id=row[0], name=row[1], post_count=row[2]) for row in rows]
