# src/campus_forum/services/admin_content.py
"""Admin moderation of posts, comments, categories and resources.

Each mutation commits first and is audited afterwards; a failing audit write
never undoes the change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from sqlalchemy import false, or_
from sqlalchemy.orm import Query, Session

from campus_forum.core.errors import AlreadyExistsError, NotFoundError, ValidationError
from campus_forum.db.session import atomic
from campus_forum.db.time import utcnow
from campus_forum.models import (
    AdminAction,
    AdminTargetType,
    Category,
    Comment,
    Post,
    Resource,
    User,
)
from campus_forum.services import cascade
from campus_forum.services.audit import AuditLog
from campus_forum.services.pagination import Page, paginate
from campus_forum.services.posts import list_categories
from campus_forum.services.visibility import ViewerContext, scope_users

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminPostQuery:
    """Typed filter set for the admin post listing."""

    category_id: int | None = None
    author_id: int | None = None
    is_deleted: bool | None = None
    is_pinned: bool | None = None
    is_locked: bool | None = None
    page: int = 1
    limit: int = 20


@dataclass(frozen=True)
class AdminCommentQuery:
    """Typed filter set for the admin comment listing."""

    post_id: int | None = None
    author_id: int | None = None
    is_deleted: bool | None = None
    page: int = 1
    limit: int = 20


class ResourceStatusFilter(str, Enum):
    ACTIVE = "active"
    DELETED = "deleted"


@dataclass(frozen=True)
class AdminResourceQuery:
    """Typed filter set for the admin resource listing; no status means all rows."""

    keyword: str | None = None
    owner_id: int | None = None
    status: ResourceStatusFilter | None = None
    page: int = 1
    limit: int = 20


def _get_post(db: Session, post_id: int) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def _get_comment(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


def _get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def _get_resource(db: Session, resource_id: int) -> Resource:
    resource = db.get(Resource, resource_id)
    if resource is None:
        raise NotFoundError("Resource not found")
    return resource


def _filter_by_author(db: Session, viewer: ViewerContext, query: Query, column: Any, author_id: int) -> Query:
    # An author hidden from the viewer filters to nothing, exactly like an unknown id.
    visible = scope_users(db.query(User.id), viewer).filter(User.id == author_id).first()
    if visible is None:
        return query.filter(false())
    return query.filter(column == author_id)


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------


def list_posts(db: Session, viewer: ViewerContext, filters: AdminPostQuery) -> Page[Post]:
    """List posts including deleted ones; stored authorship is not masked here."""
    query = db.query(Post)
    if filters.category_id is not None:
        query = query.filter(Post.category_id == filters.category_id)
    if filters.author_id is not None:
        query = _filter_by_author(db, viewer, query, Post.author_id, filters.author_id)
    if filters.is_deleted is not None:
        query = query.filter(Post.is_deleted.is_(filters.is_deleted))
    if filters.is_pinned is not None:
        query = query.filter(Post.is_pinned.is_(filters.is_pinned))
    if filters.is_locked is not None:
        query = query.filter(Post.is_locked.is_(filters.is_locked))
    query = query.order_by(Post.created_at.desc(), Post.id.desc())
    return paginate(query, filters.page, filters.limit)


def delete_post(db: Session, viewer: ViewerContext, post_id: int) -> Post:
    """Soft-delete any post."""
    post = _get_post(db, post_id)
    if post.is_deleted:
        raise ValidationError("Post is already deleted")
    with atomic(db):
        cascade.mark_post_deleted(db, post)
    AuditLog.record(db, viewer.user_id, AdminAction.DELETE_POST, AdminTargetType.POST, post_id,
                    f"Deleted post: {post.title}")
    return post


def restore_post(db: Session, viewer: ViewerContext, post_id: int) -> Post:
    """Undo a soft delete and count the post in its category again."""
    post = _get_post(db, post_id)
    if not post.is_deleted:
        raise ValidationError("Post is not deleted")
    with atomic(db):
        cascade.unmark_post_deleted(db, post)
    AuditLog.record(db, viewer.user_id, AdminAction.RESTORE_POST, AdminTargetType.POST, post_id,
                    f"Restored post: {post.title}")
    return post


def hard_delete_post(db: Session, viewer: ViewerContext, post_id: int) -> cascade.CascadeResult:
    """Permanently remove a post and its dependents."""
    title = _get_post(db, post_id).title
    result = cascade.hard_delete_post(db, post_id)
    AuditLog.record(
        db, viewer.user_id, AdminAction.HARD_DELETE_POST, AdminTargetType.POST, post_id,
        f"Permanently deleted post: {title} ({result.comments} comments)",
    )
    return result


def _set_post_flag(
    db: Session,
    viewer: ViewerContext,
    post_id: int,
    *,
    field: str,
    value: bool,
    action: AdminAction,
) -> Post:
    post = _get_post(db, post_id)
    if post.is_deleted:
        raise NotFoundError("Post not found")
    if getattr(post, field) == value:
        state = field.removeprefix("is_")
        raise ValidationError(f"Post is already {state}" if value else f"Post is not {state}")
    with atomic(db):
        setattr(post, field, value)
    AuditLog.record(db, viewer.user_id, action, AdminTargetType.POST, post_id, f"{action.value}: {post.title}")
    return post


def pin_post(db: Session, viewer: ViewerContext, post_id: int) -> Post:
    return _set_post_flag(db, viewer, post_id, field="is_pinned", value=True, action=AdminAction.PIN_POST)


def unpin_post(db: Session, viewer: ViewerContext, post_id: int) -> Post:
    return _set_post_flag(db, viewer, post_id, field="is_pinned", value=False, action=AdminAction.UNPIN_POST)


def lock_post(db: Session, viewer: ViewerContext, post_id: int) -> Post:
    return _set_post_flag(db, viewer, post_id, field="is_locked", value=True, action=AdminAction.LOCK_POST)


def unlock_post(db: Session, viewer: ViewerContext, post_id: int) -> Post:
    return _set_post_flag(db, viewer, post_id, field="is_locked", value=False, action=AdminAction.UNLOCK_POST)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


def list_comments(db: Session, viewer: ViewerContext, filters: AdminCommentQuery) -> Page[Comment]:
    """List comments including deleted ones."""
    query = db.query(Comment)
    if filters.post_id is not None:
        query = query.filter(Comment.post_id == filters.post_id)
    if filters.author_id is not None:
        query = _filter_by_author(db, viewer, query, Comment.author_id, filters.author_id)
    if filters.is_deleted is not None:
        query = query.filter(Comment.is_deleted.is_(filters.is_deleted))
    query = query.order_by(Comment.created_at.desc(), Comment.id.desc())
    return paginate(query, filters.page, filters.limit)


def delete_comment(db: Session, viewer: ViewerContext, comment_id: int) -> Comment:
    """Soft-delete any comment."""
    comment = _get_comment(db, comment_id)
    if comment.is_deleted:
        raise ValidationError("Comment is already deleted")
    with atomic(db):
        cascade.mark_comment_deleted(db, comment)
    AuditLog.record(db, viewer.user_id, AdminAction.DELETE_COMMENT, AdminTargetType.COMMENT, comment_id,
                    f"Deleted comment on post {comment.post_id}")
    return comment


def restore_comment(db: Session, viewer: ViewerContext, comment_id: int) -> Comment:
    """Undo a soft delete; the post and parent counters go back up by one."""
    comment = _get_comment(db, comment_id)
    if not comment.is_deleted:
        raise ValidationError("Comment is not deleted")
    with atomic(db):
        cascade.unmark_comment_deleted(db, comment)
    AuditLog.record(db, viewer.user_id, AdminAction.RESTORE_COMMENT, AdminTargetType.COMMENT, comment_id,
                    f"Restored comment on post {comment.post_id}")
    return comment


def hard_delete_comment(db: Session, viewer: ViewerContext, comment_id: int) -> cascade.CascadeResult:
    """Permanently remove a comment and its replies."""
    post_id = _get_comment(db, comment_id).post_id
    result = cascade.hard_delete_comment(db, comment_id)
    AuditLog.record(
        db, viewer.user_id, AdminAction.HARD_DELETE_COMMENT, AdminTargetType.COMMENT, comment_id,
        f"Permanently deleted comment on post {post_id} ({result.comments} comments)",
    )
    return result


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


def create_category(
    db: Session,
    viewer: ViewerContext,
    *,
    name: str,
    description: str | None = None,
    icon: str | None = None,
    sort_order: int = 0,
    is_anonymous: bool = False,
) -> Category:
    """Create a board; names are unique."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Category name cannot be empty")
    if db.query(Category).filter(Category.name == name).first() is not None:
        raise AlreadyExistsError("Category name already exists")

    with atomic(db):
        category = Category(
            name=name,
            description=description,
            icon=icon,
            sort_order=sort_order,
            is_anonymous=is_anonymous,
        )
        db.add(category)
    AuditLog.record(db, viewer.user_id, AdminAction.CREATE_CATEGORY, AdminTargetType.CATEGORY, category.id,
                    f"Created category {name}")
    return category


def update_category(
    db: Session,
    viewer: ViewerContext,
    category_id: int,
    *,
    name: str | None = None,
    description: str | None = None,
    icon: str | None = None,
    sort_order: int | None = None,
    is_anonymous: bool | None = None,
) -> Category:
    """Edit a board. ``post_count`` is never writable from here."""
    category = _get_category(db, category_id)
    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        clash = db.query(Category).filter(Category.name == name, Category.id != category_id).first()
        if clash is not None:
            raise AlreadyExistsError("Category name already exists")

    with atomic(db):
        if name is not None:
            category.name = name
        if description is not None:
            category.description = description
        if icon is not None:
            category.icon = icon
        if sort_order is not None:
            category.sort_order = sort_order
        if is_anonymous is not None:
            category.is_anonymous = is_anonymous
    AuditLog.record(db, viewer.user_id, AdminAction.UPDATE_CATEGORY, AdminTargetType.CATEGORY, category_id,
                    f"Updated category {category.name}")
    return category


def delete_category(db: Session, viewer: ViewerContext, category_id: int) -> None:
    """Delete an empty board."""
    category = _get_category(db, category_id)
    if category.post_count > 0:
        raise ValidationError("Category still contains posts")
    if db.query(Post).filter(Post.category_id == category_id).first() is not None:
        # Soft-deleted posts still reference the category.
        raise ValidationError("Category still contains deleted posts; remove them first")
    name = category.name
    with atomic(db):
        db.delete(category)
    AuditLog.record(db, viewer.user_id, AdminAction.DELETE_CATEGORY, AdminTargetType.CATEGORY, category_id,
                    f"Deleted category {name}")


def reorder_categories(db: Session, viewer: ViewerContext, ordered_ids: list[int]) -> list[Category]:
    """Assign ``sort_order`` following the position of each id in ``ordered_ids``."""
    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValidationError("Category ids must be unique")
    categories = {c.id: c for c in db.query(Category).filter(Category.id.in_(ordered_ids)).all()}
    missing = [cid for cid in ordered_ids if cid not in categories]
    if missing:
        raise NotFoundError(f"Category not found: {missing[0]}")

    with atomic(db):
        for position, category_id in enumerate(ordered_ids):
            categories[category_id].sort_order = position
    AuditLog.record(db, viewer.user_id, AdminAction.REORDER_CATEGORIES, AdminTargetType.CATEGORY, None,
                    f"Reordered {len(ordered_ids)} categories")
    return list_categories(db)


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


def delete_resource(db: Session, viewer: ViewerContext, resource_id: int) -> Resource:
    resource = _get_resource(db, resource_id)
    if resource.is_deleted:
        raise ValidationError("Resource is already deleted")
    with atomic(db):
        resource.is_deleted = True
        resource.deleted_at = utcnow()
    AuditLog.record(db, viewer.user_id, AdminAction.DELETE_RESOURCE, AdminTargetType.RESOURCE, resource_id,
                    f"Deleted resource: {resource.title}")
    return resource


def restore_resource(db: Session, viewer: ViewerContext, resource_id: int) -> Resource:
    resource = _get_resource(db, resource_id)
    if not resource.is_deleted:
        raise ValidationError("Resource is not deleted")
    with atomic(db):
        resource.is_deleted = False
        resource.deleted_at = None
    AuditLog.record(db, viewer.user_id, AdminAction.RESTORE_RESOURCE, AdminTargetType.RESOURCE, resource_id,
                    f"Restored resource: {resource.title}")
    return resource


def list_resources(db: Session, viewer: ViewerContext, filters: AdminResourceQuery) -> Page[Resource]:
    """List resources of every owner, private and deleted ones included."""
    query = db.query(Resource)
    if filters.status is ResourceStatusFilter.ACTIVE:
        query = query.filter(Resource.is_deleted.is_(False))
    elif filters.status is ResourceStatusFilter.DELETED:
        query = query.filter(Resource.is_deleted.is_(True))
    if filters.owner_id is not None:
        query = _filter_by_author(db, viewer, query, Resource.owner_id, filters.owner_id)
    if filters.keyword:
        pattern = f"%{filters.keyword}%"
        query = query.filter(
            or_(
                Resource.title.ilike(pattern),
                Resource.description.ilike(pattern),
                Resource.file_name.ilike(pattern),
            )
        )
    query = query.order_by(Resource.created_at.desc(), Resource.id.desc())
    return paginate(query, filters.page, filters.limit)
