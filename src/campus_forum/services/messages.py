# src/campus_forum/services/messages.py
"""Private messages and the per-counterparty conversation view.

There is no conversation table. Conversations are rebuilt on every read from
the flat message table, grouped by the other participant.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from campus_forum.core.errors import ForbiddenError, NotFoundError, ValidationError
from campus_forum.core.settings import settings
from campus_forum.db.session import atomic
from campus_forum.db.time import utcnow
from campus_forum.models import Message, User
from campus_forum.services.pagination import Page, paginate
from campus_forum.services.visibility import ViewerContext, get_visible_user, scope_users

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Conversation:
    """Summary of all messages exchanged with one counterparty."""

    counterparty: User
    last_message: Message
    unread_count: int


def _counterparty_id(message: Message, user_id: int) -> int:
    return message.receiver_id if message.sender_id == user_id else message.sender_id


def list_conversations(db: Session, viewer: ViewerContext) -> list[Conversation]:
    """Group the viewer's messages by counterparty.

    Messages are scanned newest first, ordered by ``(created_at, id)`` so that
    the higher id wins a timestamp tie. The first message seen for each
    counterparty is that conversation's last message, which also makes the
    resulting list ordered by most recent activity. The unread count only
    includes messages the viewer received from that counterparty. Counterparties
    the viewer may not observe are left out.
    """
    user_id = viewer.user_id
    messages = (
        db.query(Message)
        .filter(or_(Message.sender_id == user_id, Message.receiver_id == user_id))
        .order_by(Message.created_at.desc(), Message.id.desc())
        .all()
    )

    last_by_peer: dict[int, Message] = {}
    unread_by_peer: dict[int, int] = {}
    for message in messages:
        peer_id = _counterparty_id(message, user_id)
        if peer_id not in last_by_peer:
            last_by_peer[peer_id] = message
            unread_by_peer[peer_id] = 0
        if message.receiver_id == user_id and not message.is_read:
            unread_by_peer[peer_id] += 1

    if not last_by_peer:
        return []

    peers = {
        user.id: user
        for user in scope_users(db.query(User), viewer).filter(User.id.in_(list(last_by_peer))).all()
    }
    return [
        Conversation(
            counterparty=peers[peer_id],
            last_message=last_message,
            unread_count=unread_by_peer[peer_id],
        )
        for peer_id, last_message in last_by_peer.items()
        if peer_id in peers
    ]


def get_conversation(
    db: Session,
    viewer: ViewerContext,
    other_user_id: int,
    *,
    page: int | None = None,
    limit: int | None = None,
) -> tuple[User, Page[Message]]:
    """Return the counterparty and a page of messages with them, newest first."""
    other = get_visible_user(db, viewer, other_user_id)

    user_id = viewer.user_id
    query = (
        db.query(Message)
        .filter(
            or_(
                and_(Message.sender_id == user_id, Message.receiver_id == other_user_id),
                and_(Message.sender_id == other_user_id, Message.receiver_id == user_id),
            )
        )
        .order_by(Message.created_at.desc(), Message.id.desc())
    )
    return other, paginate(query, page, limit)


def send_message(
    db: Session,
    viewer: ViewerContext,
    *,
    receiver_id: int,
    content: str | None = None,
    image_url: str | None = None,
) -> Message:
    """Persist a message from the viewer to ``receiver_id``.

    Raises:
        ValidationError: No content and no image, oversized content, or a
            message to oneself.
        NotFoundError: The receiver does not exist or is hidden from the viewer.
        ForbiddenError: The receiver's account is deactivated.
    """
    content = content.strip() if content else None
    if not content and not image_url:
        raise ValidationError("Message must contain text or an image")
    if content and len(content) > settings.max_message_length:
        raise ValidationError(f"Message cannot exceed {settings.max_message_length} characters")
    if receiver_id == viewer.user_id:
        raise ValidationError("You cannot message yourself")

    receiver = get_visible_user(db, viewer, receiver_id)
    if not receiver.is_active:
        raise ForbiddenError("The receiver's account has been deactivated")

    with atomic(db):
        message = Message(
            sender_id=viewer.user_id,
            receiver_id=receiver_id,
            content=content,
            image_url=image_url,
        )
        db.add(message)

    logger.debug("User %s sent message %s to %s", viewer.user_id, message.id, receiver_id)
    return message


def mark_message_read(db: Session, viewer: ViewerContext, message_id: int) -> Message:
    """Mark a received message as read; already-read messages are left untouched.

    Raises:
        NotFoundError: The message does not exist.
        ForbiddenError: The viewer is not the receiver.
    """
    message = db.get(Message, message_id)
    if message is None:
        raise NotFoundError("Message not found")
    if message.receiver_id != viewer.user_id:
        raise ForbiddenError("Only the receiver can mark a message as read")
    if message.is_read:
        return message

    with atomic(db):
        message.is_read = True
        message.read_at = utcnow()
    return message


def unread_message_count(db: Session, viewer: ViewerContext) -> int:
    """Return the number of unread messages addressed to the viewer by senders they may observe."""
    query = scope_users(db.query(Message).join(User, User.id == Message.sender_id), viewer)
    return query.filter(Message.receiver_id == viewer.user_id, Message.is_read.is_(False)).count()
