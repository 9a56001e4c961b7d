"""Schemas for toggle results and follow listings."""
from __future__ import annotations

from datetime import datetime

from campus_forum.services.follows import FollowEntry

from .common import CamelModel


class LikeState(CamelModel):
    is_liked: bool
    like_count: int


class FavoriteState(CamelModel):
    is_favorited: bool
    favorite_count: int


class FollowState(CamelModel):
    is_following: bool


class FollowEntryOut(CamelModel):
    id: int
    username: str
    avatar_url: str | None = None
    bio: str | None = None
    followed_at: datetime
    is_following: bool = False

    @classmethod
    def from_entry(cls, entry: FollowEntry) -> FollowEntryOut:
        return cls(
            id=entry.user.id,
            username=entry.user.username,
            avatar_url=entry.user.avatar_url,
            bio=entry.user.bio,
            followed_at=entry.followed_at,
            is_following=entry.is_following,
        )
