# src/campus_forum/services/profiles.py
"""Self-service profile edits."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campus_forum.core.errors import AlreadyExistsError, ForbiddenError, ValidationError
from campus_forum.core.settings import settings
from campus_forum.db.session import atomic
from campus_forum.models import User
from campus_forum.services.visibility import ViewerContext, get_visible_user

logger = logging.getLogger(__name__)


def update_profile(
    db: Session,
    viewer: ViewerContext,
    user_id: int,
    *,
    username: str | None = None,
    bio: str | None = None,
    avatar_url: str | None = None,
) -> User:
    """Edit the viewer's own username, bio or avatar.

    ``None`` leaves a field unchanged; an empty bio or avatar clears it.

    Raises:
        ForbiddenError: ``user_id`` is not the viewer.
        ValidationError: Blank or overlong username, overlong bio or avatar URL.
        AlreadyExistsError: The username belongs to another account.
    """
    if user_id != viewer.user_id:
        raise ForbiddenError("You can only edit your own profile")
    user = get_visible_user(db, viewer, user_id)

    if username is not None:
        username = username.strip()
        if not username:
            raise ValidationError("Username cannot be empty")
        if len(username) > settings.max_username_length:
            raise ValidationError(f"Username cannot exceed {settings.max_username_length} characters")
        clash = db.query(User).filter(User.username == username, User.id != user_id).first()
        if clash is not None:
            raise AlreadyExistsError("Username is already taken")
    if bio is not None and len(bio) > settings.max_bio_length:
        raise ValidationError(f"Bio cannot exceed {settings.max_bio_length} characters")
    if avatar_url is not None and len(avatar_url) > settings.max_avatar_url_length:
        raise ValidationError("Avatar URL is too long")

    try:
        with atomic(db):
            if username is not None:
                user.username = username
            if bio is not None:
                user.bio = bio.strip() or None
            if avatar_url is not None:
                user.avatar_url = avatar_url or None
    except IntegrityError as exc:
        raise AlreadyExistsError("Username is already taken") from exc
    logger.info("User %s updated their profile", user_id)
    return user
