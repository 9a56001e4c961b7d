# src/campus_forum/services/visibility.py
"""Read-side visibility rules.

Three rules live here:

* authors of posts and comments in anonymous categories are replaced by a
  fixed identity at read time, for every viewer;
* an ``admin`` viewer never sees ``super_admin`` accounts or their audit
  entries, and lookups of such accounts fail with NOT_FOUND;
* private resources are filtered in the WHERE clause so they never show up
  in list results or totals for anyone but their owner.

List endpoints describe their filters with the frozen query dataclasses
below instead of free-form dictionaries. The ``build_*`` functions are the
only way those dataclasses become queries and they always apply the scope.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from sqlalchemy import false, or_
from sqlalchemy.orm import Query, Session

from campus_forum.core.errors import NotFoundError
from campus_forum.core.settings import settings
from campus_forum.models import (
    AdminLog,
    Category,
    Report,
    ReportStatus,
    ReportTargetType,
    Resource,
    ReviewStatus,
    User,
    UserRole,
)


@dataclass(frozen=True)
class ViewerContext:
    """Identity of the caller, passed explicitly into every service call."""

    user_id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.SUPER_ADMIN)

    @property
    def is_super_admin(self) -> bool:
        return self.role is UserRole.SUPER_ADMIN

    @classmethod
    def for_user(cls, user: User) -> ViewerContext:
        """Build a context from a persisted account."""
        return cls(user_id=user.id, role=UserRole(user.role))


@dataclass(frozen=True)
class AuthorView:
    """Author identity as exposed in responses."""

    id: int | None
    username: str
    avatar_url: str | None = None


def anonymous_author() -> AuthorView:
    """Return the fixed identity used inside anonymous categories."""
    return AuthorView(id=None, username=settings.anonymous_display_name, avatar_url=None)


def mask_author(
    author: User | None,
    category: Category | None,
    viewer: ViewerContext | None = None,
) -> AuthorView:
    """Return the author identity to expose for content in ``category``.

    The result does not depend on ``viewer``: inside an anonymous category
    the post's own author, other users and guests all receive the same
    masked identity. Stored authorship is never modified.
    """
    if category is not None and category.is_anonymous:
        return anonymous_author()
    if author is None:
        # Account rows are never hard-deleted while content references them.
        raise NotFoundError("Author not found")
    return AuthorView(id=author.id, username=author.username, avatar_url=author.avatar_url)


# ---------------------------------------------------------------------------
# Admin hierarchy
# ---------------------------------------------------------------------------


def hides_super_admins(viewer: ViewerContext | None) -> bool:
    """Return True when ``viewer`` must not observe super_admin rows."""
    return viewer is not None and viewer.role is UserRole.ADMIN


def scope_users(query: Query, viewer: ViewerContext | None) -> Query:
    """Restrict a ``User`` query to rows the viewer may observe."""
    if hides_super_admins(viewer):
        return query.filter(User.role != UserRole.SUPER_ADMIN.value)
    return query


def get_visible_user(db: Session, viewer: ViewerContext | None, user_id: int) -> User:
    """Return a user the viewer may observe or raise NOT_FOUND.

    Used for direct lookups and for every admin mutation keyed by user id,
    so that a hidden account is indistinguishable from a missing one.
    """
    user = scope_users(db.query(User), viewer).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


class UserStatusFilter(str, Enum):
    ACTIVE = "active"
    BANNED = "banned"


@dataclass(frozen=True)
class UserListQuery:
    """Typed filter set accepted by the admin user listing."""

    keyword: str | None = None
    role: UserRole | None = None
    status: UserStatusFilter | None = None
    review_status: ReviewStatus | None = None
    page: int = 1
    limit: int = 20


def build_user_query(db: Session, filters: UserListQuery, viewer: ViewerContext) -> Query:
    """Translate ``filters`` into a scoped ``User`` query."""
    query = scope_users(db.query(User), viewer)
    if filters.keyword:
        pattern = f"%{filters.keyword}%"
        query = query.filter(or_(User.username.ilike(pattern), User.email.ilike(pattern)))
    if filters.role is not None:
        query = query.filter(User.role == filters.role.value)
    if filters.status is UserStatusFilter.ACTIVE:
        query = query.filter(User.is_active.is_(True))
    elif filters.status is UserStatusFilter.BANNED:
        query = query.filter(User.is_active.is_(False))
    if filters.review_status is not None:
        query = query.filter(User.review_status == filters.review_status.value)
    return query.order_by(User.created_at.desc(), User.id.desc())


@dataclass(frozen=True)
class AdminLogQuery:
    """Typed filter set accepted by the audit-log listing."""

    action: str | None = None
    target_type: str | None = None
    admin_id: int | None = None
    page: int = 1
    limit: int = 20


def build_admin_log_query(db: Session, filters: AdminLogQuery, viewer: ViewerContext) -> Query:
    """Translate ``filters`` into an ``AdminLog`` query hiding super_admin authors."""
    query = db.query(AdminLog).join(User, User.id == AdminLog.admin_id)
    query = scope_users(query, viewer)
    if filters.action:
        query = query.filter(AdminLog.action == filters.action)
    if filters.target_type:
        query = query.filter(AdminLog.target_type == filters.target_type)
    if filters.admin_id is not None:
        query = query.filter(AdminLog.admin_id == filters.admin_id)
    return query.order_by(AdminLog.created_at.desc(), AdminLog.id.desc())


@dataclass(frozen=True)
class ReportListQuery:
    """Typed filter set accepted by the admin report listing."""

    status: ReportStatus | None = None
    target_type: ReportTargetType | None = None
    page: int = 1
    limit: int = 20


def build_report_query(db: Session, filters: ReportListQuery, viewer: ViewerContext) -> Query:
    """Translate ``filters`` into a ``(Report, reporter)`` query hiding super_admin reporters."""
    query = db.query(Report, User).join(User, User.id == Report.reporter_id)
    query = scope_users(query, viewer)
    if filters.status is not None:
        query = query.filter(Report.status == filters.status.value)
    if filters.target_type is not None:
        query = query.filter(Report.target_type == filters.target_type.value)
    return query.order_by(Report.created_at.desc(), Report.id.desc())


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


def scope_resources(query: Query, viewer: ViewerContext | None) -> Query:
    """Keep public resources plus the viewer's own private ones."""
    query = query.filter(Resource.is_deleted.is_(False))
    if viewer is None:
        return query.filter(Resource.is_public.is_(True))
    return query.filter(or_(Resource.is_public.is_(True), Resource.owner_id == viewer.user_id))


@dataclass(frozen=True)
class ResourceListQuery:
    """Typed filter set accepted by the resource listing."""

    owner_id: int | None = None
    only_mine: bool = False
    page: int = 1
    limit: int = 20


def build_resource_query(
    db: Session,
    filters: ResourceListQuery,
    viewer: ViewerContext | None,
) -> Query:
    """Translate ``filters`` into a scoped ``Resource`` query."""
    query = scope_resources(db.query(Resource), viewer)
    if filters.only_mine:
        if viewer is None:
            return query.filter(false())
        query = query.filter(Resource.owner_id == viewer.user_id)
    elif filters.owner_id is not None:
        query = query.filter(Resource.owner_id == filters.owner_id)
    return query.order_by(Resource.created_at.desc(), Resource.id.desc())


def get_visible_resource(
    db: Session,
    viewer: ViewerContext | None,
    resource_id: int,
) -> Resource:
    """Return a resource the viewer may see or raise NOT_FOUND."""
    resource = scope_resources(db.query(Resource), viewer).filter(Resource.id == resource_id).first()
    if resource is None:
        raise NotFoundError("Resource not found")
    return resource
