# src/campus_forum/services/admin_users.py
"""Account administration: listing, bans, edits, password resets and reviews.

Every target lookup goes through :func:`get_visible_user`, so an ``admin``
acting on a ``super_admin`` gets NOT_FOUND exactly as if the id did not
exist. Rules between visible accounts (an admin editing another admin) are
reported as FORBIDDEN because existence is not secret there.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from campus_forum.core.errors import AlreadyExistsError, ForbiddenError, ValidationError
from campus_forum.core.security import hash_password
from campus_forum.core.settings import settings
from campus_forum.db.session import atomic
from campus_forum.models import AdminAction, AdminTargetType, ReviewStatus, User, UserRole
from campus_forum.services.audit import AuditLog
from campus_forum.services.pagination import Page, paginate
from campus_forum.services.visibility import (
    UserListQuery,
    ViewerContext,
    build_user_query,
    get_visible_user,
)

logger = logging.getLogger(__name__)

_ADMIN_ROLES = (UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value)


def _get_manageable_user(db: Session, viewer: ViewerContext, user_id: int) -> User:
    """Return a target the viewer may act on.

    Raises:
        NotFoundError: Missing or hidden target.
        ForbiddenError: An ordinary admin targeting another admin.
    """
    target = get_visible_user(db, viewer, user_id)
    if (
        viewer.role is UserRole.ADMIN
        and target.role == UserRole.ADMIN.value
        and target.id != viewer.user_id
    ):
        raise ForbiddenError("Admins cannot manage other admins")
    return target


def list_users(db: Session, viewer: ViewerContext, filters: UserListQuery) -> Page[User]:
    """List accounts matching ``filters`` that the viewer may observe."""
    return paginate(build_user_query(db, filters, viewer), filters.page, filters.limit)


def get_user(db: Session, viewer: ViewerContext, user_id: int) -> User:
    """Look up one account; hidden accounts are NOT_FOUND."""
    return get_visible_user(db, viewer, user_id)


def ban_user(db: Session, viewer: ViewerContext, user_id: int, reason: str | None = None) -> User:
    """Deactivate an account."""
    target = _get_manageable_user(db, viewer, user_id)
    if target.id == viewer.user_id:
        raise ValidationError("You cannot ban yourself")
    if target.role == UserRole.SUPER_ADMIN.value:
        raise ForbiddenError("Super admins cannot be banned")
    if not target.is_active:
        raise ValidationError("User is already banned")

    with atomic(db):
        target.is_active = False

    description = f"Banned user {target.username}"
    if reason:
        description += f": {reason}"
    AuditLog.record(db, viewer.user_id, AdminAction.BAN_USER, AdminTargetType.USER, target.id, description)
    logger.info("Admin %s banned user %s", viewer.user_id, target.id)
    return target


def unban_user(db: Session, viewer: ViewerContext, user_id: int) -> User:
    """Reactivate a banned account."""
    target = _get_manageable_user(db, viewer, user_id)
    if target.is_active:
        raise ValidationError("User is not banned")

    with atomic(db):
        target.is_active = True

    AuditLog.record(
        db, viewer.user_id, AdminAction.UNBAN_USER, AdminTargetType.USER, target.id,
        f"Unbanned user {target.username}",
    )
    return target


def update_user(
    db: Session,
    viewer: ViewerContext,
    user_id: int,
    *,
    username: str | None = None,
    email: str | None = None,
    bio: str | None = None,
    avatar_url: str | None = None,
    role: UserRole | None = None,
) -> User:
    """Edit profile fields and, for super admins, roles.

    Raises:
        ForbiddenError: Role changes that involve admin-level roles requested
            by anyone but a super admin.
        AlreadyExistsError: Username or email taken by another account.
    """
    target = _get_manageable_user(db, viewer, user_id)

    if role is not None and role.value != target.role:
        touches_admin_level = role.value in _ADMIN_ROLES or target.role in _ADMIN_ROLES
        if touches_admin_level and not viewer.is_super_admin:
            raise ForbiddenError("Only super admins can grant or revoke admin roles")
        if target.id == viewer.user_id:
            raise ValidationError("You cannot change your own role")

    if username is not None:
        username = username.strip()
        if not username:
            raise ValidationError("Username cannot be empty")
        taken = db.query(User).filter(User.username == username, User.id != target.id).first()
        if taken is not None:
            raise AlreadyExistsError("Username is already taken")
    if email is not None:
        taken = db.query(User).filter(User.email == email, User.id != target.id).first()
        if taken is not None:
            raise AlreadyExistsError("Email is already in use")

    changed: list[str] = []
    with atomic(db):
        for field, value in (
            ("username", username),
            ("email", email),
            ("bio", bio),
            ("avatar_url", avatar_url),
            ("role", role.value if role is not None else None),
        ):
            if value is not None and getattr(target, field) != value:
                setattr(target, field, value)
                changed.append(field)

    if changed:
        AuditLog.record(
            db, viewer.user_id, AdminAction.UPDATE_USER, AdminTargetType.USER, target.id,
            f"Updated {', '.join(changed)} of user {target.username}",
        )
    return target


def reset_password(db: Session, viewer: ViewerContext, user_id: int, new_password: str) -> None:
    """Set a new password for an account."""
    if not new_password or len(new_password) < settings.min_password_length:
        raise ValidationError(f"Password must be at least {settings.min_password_length} characters")
    target = _get_manageable_user(db, viewer, user_id)

    with atomic(db):
        target.password_hash = hash_password(new_password)

    AuditLog.record(
        db, viewer.user_id, AdminAction.RESET_PASSWORD, AdminTargetType.USER, target.id,
        f"Reset password of user {target.username}",
    )


def _review(db: Session, viewer: ViewerContext, user_id: int, outcome: ReviewStatus) -> User:
    target = _get_manageable_user(db, viewer, user_id)
    if target.review_status != ReviewStatus.PENDING.value:
        raise ValidationError("User is not awaiting review")

    with atomic(db):
        target.review_status = outcome.value

    action = AdminAction.APPROVE_USER if outcome is ReviewStatus.APPROVED else AdminAction.REJECT_USER
    AuditLog.record(
        db, viewer.user_id, action, AdminTargetType.USER, target.id,
        f"Registration of {target.username} {outcome.value}",
    )
    return target


def approve_user(db: Session, viewer: ViewerContext, user_id: int) -> User:
    """Approve a pending registration so the account can sign in."""
    return _review(db, viewer, user_id, ReviewStatus.APPROVED)


def reject_user(db: Session, viewer: ViewerContext, user_id: int) -> User:
    """Reject a pending registration."""
    return _review(db, viewer, user_id, ReviewStatus.REJECTED)
