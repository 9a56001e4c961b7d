# src/campus_forum/models/admin_log.py
"""Audit trail of admin-initiated mutations."""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campus_forum.db.session import Base
from campus_forum.db.time import utcnow


class AdminAction(str, Enum):
    DELETE_POST = "delete_post"
    RESTORE_POST = "restore_post"
    HARD_DELETE_POST = "hard_delete_post"
    PIN_POST = "pin_post"
    UNPIN_POST = "unpin_post"
    LOCK_POST = "lock_post"
    UNLOCK_POST = "unlock_post"
    DELETE_COMMENT = "delete_comment"
    RESTORE_COMMENT = "restore_comment"
    HARD_DELETE_COMMENT = "hard_delete_comment"
    BAN_USER = "ban_user"
    UNBAN_USER = "unban_user"
    UPDATE_USER = "update_user"
    RESET_PASSWORD = "reset_password"
    APPROVE_USER = "approve_user"
    REJECT_USER = "reject_user"
    CREATE_CATEGORY = "create_category"
    UPDATE_CATEGORY = "update_category"
    DELETE_CATEGORY = "delete_category"
    REORDER_CATEGORIES = "reorder_categories"
    DELETE_RESOURCE = "delete_resource"
    RESTORE_RESOURCE = "restore_resource"
    PROCESS_REPORT = "process_report"


class AdminTargetType(str, Enum):
    POST = "post"
    COMMENT = "comment"
    USER = "user"
    CATEGORY = "category"
    RESOURCE = "resource"
    REPORT = "report"


class AdminLog(Base):
    """One audited admin action."""

    __tablename__ = "admin_log"
    __table_args__ = (Index("ix_admin_log_admin_id", "admin_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    admin_id: Mapped[int] = mapped_column(Integer, ForeignKey("user_account.id"), nullable=False)
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
