"""User-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field

from campus_forum.models import ReviewStatus, UserRole
from campus_forum.services.visibility import AuthorView

from .common import CamelModel


class AuthorOut(CamelModel):
    """Author identity; ``id`` is null for masked (anonymous) authors."""

    id: int | None
    username: str
    avatar_url: str | None = None

    @classmethod
    def from_view(cls, view: AuthorView) -> AuthorOut:
        return cls(id=view.id, username=view.username, avatar_url=view.avatar_url)


class UserSummary(CamelModel):
    id: int
    username: str
    avatar_url: str | None = None
    bio: str | None = None


class UserProfileOut(UserSummary):
    follower_count: int
    following_count: int
    is_following: bool = False


class AdminUserOut(CamelModel):
    """Full account view for the back-office."""

    id: int
    username: str
    email: str | None = None
    avatar_url: str | None = None
    bio: str | None = None
    role: UserRole
    is_active: bool
    review_status: ReviewStatus
    created_at: datetime
    last_login_at: datetime | None = None


class AdminUserUpdate(CamelModel):
    username: str | None = Field(None, min_length=1, max_length=50)
    email: str | None = Field(None, max_length=255)
    bio: str | None = None
    avatar_url: str | None = None
    role: UserRole | None = None


class BanRequest(CamelModel):
    reason: str | None = Field(None, max_length=500)


class ResetPasswordRequest(CamelModel):
    new_password: str = Field(..., description="New plain-text password")


class ProfileUpdate(CamelModel):
    """Self-service profile edit; omitted fields stay unchanged."""

    username: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
