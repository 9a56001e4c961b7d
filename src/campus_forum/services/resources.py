# src/campus_forum/services/resources.py
"""Learning-resource sharing (metadata only; bytes live with the storage service)."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from campus_forum.core.errors import ForbiddenError, ValidationError
from campus_forum.db.session import atomic
from campus_forum.db.time import utcnow
from campus_forum.models import Resource
from campus_forum.services.counters import RESOURCE_DOWNLOAD_COUNT, apply_delta
from campus_forum.services.pagination import Page, paginate
from campus_forum.services.visibility import (
    ResourceListQuery,
    ViewerContext,
    build_resource_query,
    get_visible_resource,
)

logger = logging.getLogger(__name__)


def create_resource(
    db: Session,
    viewer: ViewerContext,
    *,
    title: str,
    file_url: str,
    file_name: str,
    file_size: int = 0,
    description: str | None = None,
    is_public: bool = True,
) -> Resource:
    """Register an uploaded file as a resource owned by the viewer."""
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title cannot be empty")
    if not file_url or not file_name:
        raise ValidationError("A file is required")
    if file_size < 0:
        raise ValidationError("File size cannot be negative")

    with atomic(db):
        resource = Resource(
            owner_id=viewer.user_id,
            title=title,
            description=description,
            file_url=file_url,
            file_name=file_name,
            file_size=file_size,
            is_public=is_public,
        )
        db.add(resource)
    logger.info("User %s shared resource %s (public=%s)", viewer.user_id, resource.id, is_public)
    return resource


def list_resources(db: Session, viewer: ViewerContext | None, filters: ResourceListQuery) -> Page[Resource]:
    """List resources visible to the viewer; totals never count hidden rows."""
    return paginate(build_resource_query(db, filters, viewer), filters.page, filters.limit)


def get_resource(db: Session, viewer: ViewerContext | None, resource_id: int) -> Resource:
    """Return one visible resource; private resources of others are NOT_FOUND."""
    return get_visible_resource(db, viewer, resource_id)


def download_resource(db: Session, viewer: ViewerContext | None, resource_id: int) -> Resource:
    """Count a download of a visible resource and return it."""
    resource = get_visible_resource(db, viewer, resource_id)
    with atomic(db):
        apply_delta(db, RESOURCE_DOWNLOAD_COUNT, resource.id, +1)
    return resource


def delete_resource(db: Session, viewer: ViewerContext, resource_id: int) -> None:
    """Soft-delete the viewer's own resource."""
    resource = get_visible_resource(db, viewer, resource_id)
    if resource.owner_id != viewer.user_id:
        raise ForbiddenError("You can only delete your own resources")
    with atomic(db):
        resource.is_deleted = True
        resource.deleted_at = utcnow()
