# src/campus_forum/models/message.py
"""Models describing private messages between users."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_forum.db.session import Base
from campus_forum.db.time import utcnow


class Message(Base):
    """Private message. Immutable apart from the one-way read transition."""

    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_sender_receiver", "sender_id", "receiver_id"),
        Index("ix_message_receiver_unread", "receiver_id", "is_read"),
    )

    # Monotonic ids break ties between messages sharing a timestamp.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[int] = mapped_column(Integer, ForeignKey("user_account.id"), nullable=False)
    receiver_id: Mapped[int] = mapped_column(Integer, ForeignKey("user_account.id"), nullable=False)

    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
