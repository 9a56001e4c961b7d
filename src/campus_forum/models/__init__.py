# src/campus_forum/models/__init__.py
"""SQLAlchemy models for the Campus Forum application."""

from .admin_log import AdminAction, AdminLog, AdminTargetType
from .category import Category
from .interaction import Favorite, Follow, Like, LikeTargetType
from .message import Message
from .notification import Notification, NotificationType
from .post import Comment, Post
from .report import Report, ReportStatus, ReportTargetType
from .resource import Resource
from .user import ReviewStatus, User, UserRole

__all__ = [
    "AdminAction", "AdminLog", "AdminTargetType",
    "Category",
    "Favorite", "Follow", "Like", "LikeTargetType",
    "Message",
    "Notification", "NotificationType",
    "Comment", "Post",
    "Report", "ReportStatus", "ReportTargetType",
    "Resource",
    "ReviewStatus", "User", "UserRole",
]
