# src/campus_forum/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .categories import router as categories_router
from .comments import router as comments_router
from .messages import router as messages_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .reports import router as reports_router
from .resources import router as resources_router
from .users import router as users_router

__all__ = [
    "posts_router",
    "comments_router",
    "categories_router",
    "users_router",
    "messages_router",
    "notifications_router",
    "resources_router",
    "reports_router",
    "admin_router",
]
