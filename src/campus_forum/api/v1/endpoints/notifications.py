# src/campus_forum/api/v1/endpoints/notifications.py
"""Notification inbox endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from campus_forum.schemas.common import ApiResponse, Pagination
from campus_forum.schemas.message import UnreadCountOut
from campus_forum.schemas.notification import MarkAllReadOut, NotificationListOut, NotificationOut
from campus_forum.services import notifications as notification_service

from ..dependencies import LimitParam, PageParam, SessionDep, ViewerDep

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=ApiResponse[NotificationListOut])
async def list_notifications(
    db: SessionDep,
    viewer: ViewerDep,
    is_read: Annotated[bool | None, Query(alias="isRead")] = None,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[NotificationListOut]:
    """List the viewer's notifications with the current unread count."""
    result = notification_service.list_notifications(db, viewer, is_read=is_read, page=page, limit=limit)
    return ApiResponse(
        data=NotificationListOut(
            items=[NotificationOut.model_validate(n) for n in result.page.items],
            pagination=Pagination.from_page(result.page),
            unread_count=result.unread_count,
        )
    )


@router.put("/read-all", response_model=ApiResponse[MarkAllReadOut])
async def mark_all_read(db: SessionDep, viewer: ViewerDep) -> ApiResponse[MarkAllReadOut]:
    updated = notification_service.mark_all_notifications_read(db, viewer)
    return ApiResponse(data=MarkAllReadOut(updated_count=updated), message="All notifications marked as read")


@router.put("/{notification_id}/read", response_model=ApiResponse[NotificationOut])
async def mark_read(notification_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[NotificationOut]:
    notification = notification_service.mark_notification_read(db, viewer, notification_id)
    return ApiResponse(data=NotificationOut.model_validate(notification))


@router.get("/unread-count", response_model=ApiResponse[UnreadCountOut])
async def unread_count(db: SessionDep, viewer: ViewerDep) -> ApiResponse[UnreadCountOut]:
    return ApiResponse(data=UnreadCountOut(count=notification_service.unread_notification_count(db, viewer)))
