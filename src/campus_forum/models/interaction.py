# src/campus_forum/models/interaction.py
"""Append-only fact rows for likes, favorites and follows."""

from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from campus_forum.db.session import Base
from campus_forum.db.time import utcnow


class LikeTargetType(str, Enum):
    """Kinds of entities that can be liked."""

    POST = "post"
    COMMENT = "comment"


class Like(Base):
    """A user's like on a post or a comment."""

    __tablename__ = "user_like"
    __table_args__ = (
        UniqueConstraint("user_id", "target_type", "target_id", name="uq_like_user_target"),
        CheckConstraint("target_type IN ('post', 'comment')", name="ck_like_target_type"),
        Index("ix_like_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("user_account.id"), nullable=False)
    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class Favorite(Base):
    """A post bookmarked by a user."""

    __tablename__ = "favorite"
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_favorite_user_post"),
        Index("ix_favorite_post_id", "post_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("user_account.id"), nullable=False)
    post_id: Mapped[int] = mapped_column(Integer, ForeignKey("post.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)


class Follow(Base):
    """Directed follow edge between two users."""

    __tablename__ = "follow"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follow_pair"),
        CheckConstraint("follower_id <> following_id", name="ck_follow_not_self"),
        Index("ix_follow_following_id", "following_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    follower_id: Mapped[int] = mapped_column(Integer, ForeignKey("user_account.id"), nullable=False)
    following_id: Mapped[int] = mapped_column(Integer, ForeignKey("user_account.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
