"""Comment-related Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field

from campus_forum.services.comments import CommentView

from .common import CamelModel
from .user import AuthorOut


class CommentCreate(CamelModel):
    content: str = Field(..., description="Comment text")
    parent_id: int | None = Field(None, description="Comment being replied to")


class CommentUpdate(CamelModel):
    content: str


class CommentOut(CamelModel):
    id: int
    post_id: int
    parent_id: int | None = None
    content: str
    author: AuthorOut
    like_count: int
    reply_count: int
    is_liked: bool = False
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_view(cls, view: CommentView) -> CommentOut:
        comment = view.comment
        return cls(
            id=comment.id,
            post_id=comment.post_id,
            parent_id=comment.parent_id,
            content=comment.content,
            author=AuthorOut.from_view(view.author),
            like_count=comment.like_count,
            reply_count=comment.reply_count,
            is_liked=view.is_liked,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
        )


class AdminCommentOut(CamelModel):
    id: int
    post_id: int
    parent_id: int | None = None
    author_id: int
    content: str
    is_deleted: bool
    deleted_at: datetime | None = None
    like_count: int
    reply_count: int
    created_at: datetime
