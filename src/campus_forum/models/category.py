# src/campus_forum/models/category.py
"""Models for post categories (boards)."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_forum.db.session import Base
from campus_forum.db.time import utcnow


class Category(Base):
    """Board that groups posts.

    Posts in an anonymous category never expose their author on read.
    """

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Mirrors the number of non-deleted posts in this category.
    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
