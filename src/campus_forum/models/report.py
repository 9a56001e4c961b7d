# src/campus_forum/models/report.py
"""User reports against posts and resources."""

from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_forum.db.session import Base
from campus_forum.db.time import utcnow


class ReportTargetType(str, Enum):
    POST = "post"
    RESOURCE = "resource"


class ReportStatus(str, Enum):
    PENDING = "pending"
    PROCESSED = "processed"


class Report(Base):
    """A complaint filed by a user and later closed by an admin."""

    __tablename__ = "report"
    __table_args__ = (
        CheckConstraint("target_type IN ('post', 'resource')", name="ck_report_target_type"),
        Index("ix_report_target", "target_type", "target_id"),
        Index("ix_report_reporter_status", "reporter_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    reporter_id: Mapped[int] = mapped_column(Integer, ForeignKey("user_account.id"), nullable=False)
    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ReportStatus.PENDING.value)
    processed_by: Mapped[int | None] = mapped_column(Integer, ForeignKey("user_account.id"), nullable=True)
    processed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    remark: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
