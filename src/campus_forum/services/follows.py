# src/campus_forum/services/follows.py
"""Follow graph listings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from campus_forum.models import Follow, User
from campus_forum.services.pagination import Page, paginate
from campus_forum.services.toggles import Relation, active_targets, is_active
from campus_forum.services.visibility import ViewerContext, get_visible_user, scope_users


@dataclass(frozen=True)
class FollowEntry:
    user: User
    followed_at: datetime
    is_following: bool = False


def _entries(
    db: Session,
    viewer: ViewerContext | None,
    rows: list[tuple[Follow, User]],
) -> list[FollowEntry]:
    followed_by_viewer = active_targets(db, viewer, Relation.FOLLOW, [user.id for _, user in rows])
    return [
        FollowEntry(user=user, followed_at=follow.created_at, is_following=user.id in followed_by_viewer)
        for follow, user in rows
    ]


def list_following(
    db: Session,
    viewer: ViewerContext | None,
    user_id: int,
    *,
    page: int | None = None,
    limit: int | None = None,
) -> Page[FollowEntry]:
    """Users that ``user_id`` follows, most recent first."""
    get_visible_user(db, viewer, user_id)
    query = scope_users(
        db.query(Follow, User).join(User, User.id == Follow.following_id),
        viewer,
    )
    query = query.filter(Follow.follower_id == user_id).order_by(Follow.created_at.desc(), Follow.id.desc())
    result = paginate(query, page, limit)
    return Page(items=_entries(db, viewer, result.items), total=result.total, page=result.page, limit=result.limit)


def list_followers(
    db: Session,
    viewer: ViewerContext | None,
    user_id: int,
    *,
    page: int | None = None,
    limit: int | None = None,
) -> Page[FollowEntry]:
    """Users following ``user_id``; ``is_following`` tells whether the viewer follows each back."""
    get_visible_user(db, viewer, user_id)
    query = scope_users(
        db.query(Follow, User).join(User, User.id == Follow.follower_id),
        viewer,
    )
    query = query.filter(Follow.following_id == user_id).order_by(Follow.created_at.desc(), Follow.id.desc())
    result = paginate(query, page, limit)
    return Page(items=_entries(db, viewer, result.items), total=result.total, page=result.page, limit=result.limit)


def follow_counts(db: Session, viewer: ViewerContext | None, user_id: int) -> tuple[int, int]:
    """Return ``(followers, following)`` for ``user_id``, counting only accounts the viewer may see."""
    followers = scope_users(
        db.query(Follow).join(User, User.id == Follow.follower_id), viewer
    ).filter(Follow.following_id == user_id).count()
    following = scope_users(
        db.query(Follow).join(User, User.id == Follow.following_id), viewer
    ).filter(Follow.follower_id == user_id).count()
    return followers, following


@dataclass(frozen=True)
class UserProfile:
    user: User
    follower_count: int
    following_count: int
    is_following: bool = False


def get_profile(db: Session, viewer: ViewerContext | None, user_id: int) -> UserProfile:
    """Public profile of ``user_id`` with follow figures relative to the viewer."""
    user = get_visible_user(db, viewer, user_id)
    followers, following = follow_counts(db, viewer, user.id)
    return UserProfile(
        user=user,
        follower_count=followers,
        following_count=following,
        is_following=is_active(db, viewer, Relation.FOLLOW, user.id),
    )
