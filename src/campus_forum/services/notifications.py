# src/campus_forum/services/notifications.py
"""Notification inbox: creation, listing and one-way read transitions."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from campus_forum.core.errors import ForbiddenError, NotFoundError
from campus_forum.db.session import atomic
from campus_forum.db.time import utcnow
from campus_forum.models import Notification, NotificationType
from campus_forum.services.pagination import Page, paginate
from campus_forum.services.visibility import ViewerContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationPage:
    page: Page[Notification]
    unread_count: int


def notify(
    db: Session,
    *,
    user_id: int,
    type_: NotificationType,
    title: str,
    content: str | None = None,
    link: str | None = None,
    related_id: int | None = None,
) -> Notification:
    """Queue a notification inside the caller's transaction."""
    notification = Notification(
        user_id=user_id,
        type=type_.value,
        title=title,
        content=content,
        link=link,
        related_id=related_id,
    )
    db.add(notification)
    return notification


def unread_notification_count(db: Session, viewer: ViewerContext) -> int:
    """Return how many of the viewer's notifications are unread."""
    return (
        db.query(Notification)
        .filter(Notification.user_id == viewer.user_id, Notification.is_read.is_(False))
        .count()
    )


def list_notifications(
    db: Session,
    viewer: ViewerContext,
    *,
    is_read: bool | None = None,
    page: int | None = None,
    limit: int | None = None,
) -> NotificationPage:
    """List the viewer's notifications, newest first."""
    query = db.query(Notification).filter(Notification.user_id == viewer.user_id)
    if is_read is not None:
        query = query.filter(Notification.is_read.is_(is_read))
    query = query.order_by(Notification.created_at.desc(), Notification.id.desc())
    return NotificationPage(
        page=paginate(query, page, limit),
        unread_count=unread_notification_count(db, viewer),
    )


def mark_notification_read(db: Session, viewer: ViewerContext, notification_id: int) -> Notification:
    """Mark one notification as read.

    The transition is monotonic: a notification that is already read keeps
    its original ``read_at`` and the call succeeds without writing.

    Raises:
        NotFoundError: If the notification does not exist.
        ForbiddenError: If it belongs to another user.
    """
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("Notification not found")
    if notification.user_id != viewer.user_id:
        raise ForbiddenError("Cannot modify another user's notification")
    if notification.is_read:
        return notification

    with atomic(db):
        notification.is_read = True
        notification.read_at = utcnow()
    return notification


def mark_all_notifications_read(db: Session, viewer: ViewerContext) -> int:
    """Mark every unread notification of the viewer as read and return how many changed."""
    with atomic(db):
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == viewer.user_id, Notification.is_read.is_(False))
            .update({Notification.is_read: True, Notification.read_at: utcnow()}, synchronize_session="fetch")
        )
    logger.debug("Marked %d notifications read for user %s", updated, viewer.user_id)
    return updated
