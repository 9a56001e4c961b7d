"""Notification Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from .common import CamelModel, Pagination


class NotificationOut(CamelModel):
    id: int
    type: str
    title: str
    content: str | None = None
    link: str | None = None
    related_id: int | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime


class NotificationListOut(CamelModel):
    items: list[NotificationOut]
    pagination: Pagination
    unread_count: int


class MarkAllReadOut(CamelModel):
    updated_count: int
