"""Post-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field

from campus_forum.services.posts import PostView

from .common import CamelModel
from .user import AuthorOut


class CategoryOut(CamelModel):
    id: int
    name: str
    description: str | None = None
    icon: str | None = None
    sort_order: int
    is_anonymous: bool
    post_count: int


class PostCreate(CamelModel):
    """Schema for creating a new post."""

    category_id: int = Field(..., description="Target category")
    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Post body")


class PostUpdate(CamelModel):
    title: str | None = None
    content: str | None = None


class PostOut(CamelModel):
    """Post as returned to readers; ``author`` is already masked where needed."""

    id: int
    category_id: int
    category_name: str
    is_anonymous: bool
    title: str
    content: str
    author: AuthorOut
    is_pinned: bool
    is_locked: bool
    view_count: int
    like_count: int
    comment_count: int
    favorite_count: int
    is_liked: bool = False
    is_favorited: bool = False
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(cls, view: PostView) -> PostOut:
        post = view.post
        return cls(
            id=post.id,
            category_id=post.category_id,
            category_name=view.category.name,
            is_anonymous=view.category.is_anonymous,
            title=post.title,
            content=post.content,
            author=AuthorOut.from_view(view.author),
            is_pinned=post.is_pinned,
            is_locked=post.is_locked,
            view_count=post.view_count,
            like_count=post.like_count,
            comment_count=post.comment_count,
            favorite_count=post.favorite_count,
            is_liked=view.is_liked,
            is_favorited=view.is_favorited,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class AdminPostOut(CamelModel):
    """Unmasked post view for the back-office."""

    id: int
    category_id: int
    author_id: int
    title: str
    is_deleted: bool
    deleted_at: datetime | None = None
    is_pinned: bool
    is_locked: bool
    view_count: int
    like_count: int
    comment_count: int
    favorite_count: int
    created_at: datetime
