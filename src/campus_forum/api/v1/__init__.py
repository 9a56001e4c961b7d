# src/campus_forum/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    categories_router,
    comments_router,
    messages_router,
    notifications_router,
    posts_router,
    reports_router,
    resources_router,
    users_router,
)

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
