# src/campus_forum/api/v1/endpoints/admin.py
"""Admin back-office endpoints.

Every route requires an admin or super admin. User lookups go through the
admin-hierarchy filter, so super admins are invisible to plain admins.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from campus_forum.models import ReportStatus, ReportTargetType, ReviewStatus, UserRole
from campus_forum.schemas.admin import (
    AdminLogOut,
    CascadeOut,
    CategoryBreakdownOut,
    CategoryCreate,
    CategoryFigureOut,
    CategoryReorder,
    CategoryUpdate,
    OverviewOut,
    TrendOut,
)
from campus_forum.schemas.comment import AdminCommentOut
from campus_forum.schemas.common import ApiResponse, PageOut, Pagination
from campus_forum.schemas.post import AdminPostOut, CategoryOut
from campus_forum.schemas.report import AdminReportOut, ReportProcess
from campus_forum.schemas.resource import AdminResourceOut
from campus_forum.schemas.user import AdminUserOut, AdminUserUpdate, BanRequest, ResetPasswordRequest
from campus_forum.services import admin_content, admin_users, stats
from campus_forum.services import reports as report_service
from campus_forum.services.admin_content import (
    AdminCommentQuery,
    AdminPostQuery,
    AdminResourceQuery,
    ResourceStatusFilter,
)
from campus_forum.services.audit import list_admin_logs
from campus_forum.services.posts import list_categories as list_all_categories
from campus_forum.services.stats import StatsPeriod
from campus_forum.services.visibility import AdminLogQuery, ReportListQuery, UserListQuery, UserStatusFilter

from ..dependencies import AdminDep, LimitParam, PageParam, SessionDep

router = APIRouter(prefix="/admin", tags=["admin"])


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.get("/users", response_model=ApiResponse[PageOut[AdminUserOut]])
async def list_users(
    db: SessionDep,
    viewer: AdminDep,
    keyword: str | None = None,
    role: UserRole | None = None,
    user_status: Annotated[UserStatusFilter | None, Query(alias="status")] = None,
    review_status: Annotated[ReviewStatus | None, Query(alias="reviewStatus")] = None,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[PageOut[AdminUserOut]]:
    """Search accounts visible to the acting admin."""
    filters = UserListQuery(
        keyword=keyword,
        role=role,
        status=user_status,
        review_status=review_status,
        page=page,
        limit=limit,
    )
    result = admin_users.list_users(db, viewer, filters)
    return ApiResponse(
        data=PageOut(
            items=[AdminUserOut.model_validate(u) for u in result.items],
            pagination=Pagination.from_page(result),
        )
    )


@router.get("/users/{user_id}", response_model=ApiResponse[AdminUserOut])
async def get_user(user_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminUserOut]:
    return ApiResponse(data=AdminUserOut.model_validate(admin_users.get_user(db, viewer, user_id)))


@router.post("/users/{user_id}/ban", response_model=ApiResponse[AdminUserOut])
async def ban_user(
    user_id: int,
    db: SessionDep,
    viewer: AdminDep,
    payload: BanRequest | None = None,
) -> ApiResponse[AdminUserOut]:
    reason = payload.reason if payload else None
    user = admin_users.ban_user(db, viewer, user_id, reason)
    return ApiResponse(data=AdminUserOut.model_validate(user), message="User banned")


@router.post("/users/{user_id}/unban", response_model=ApiResponse[AdminUserOut])
async def unban_user(user_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminUserOut]:
    user = admin_users.unban_user(db, viewer, user_id)
    return ApiResponse(data=AdminUserOut.model_validate(user), message="User unbanned")


@router.put("/users/{user_id}", response_model=ApiResponse[AdminUserOut])
async def update_user(
    user_id: int,
    payload: AdminUserUpdate,
    db: SessionDep,
    viewer: AdminDep,
) -> ApiResponse[AdminUserOut]:
    user = admin_users.update_user(
        db,
        viewer,
        user_id,
        username=payload.username,
        email=payload.email,
        bio=payload.bio,
        avatar_url=payload.avatar_url,
        role=payload.role,
    )
    return ApiResponse(data=AdminUserOut.model_validate(user), message="User updated")


@router.post("/users/{user_id}/reset-password", response_model=ApiResponse[None])
async def reset_password(
    user_id: int,
    payload: ResetPasswordRequest,
    db: SessionDep,
    viewer: AdminDep,
) -> ApiResponse[None]:
    admin_users.reset_password(db, viewer, user_id, payload.new_password)
    return ApiResponse(message="Password reset")


@router.post("/users/{user_id}/approve", response_model=ApiResponse[AdminUserOut])
async def approve_user(user_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminUserOut]:
    user = admin_users.approve_user(db, viewer, user_id)
    return ApiResponse(data=AdminUserOut.model_validate(user), message="Registration approved")


@router.post("/users/{user_id}/reject", response_model=ApiResponse[AdminUserOut])
async def reject_user(user_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminUserOut]:
    user = admin_users.reject_user(db, viewer, user_id)
    return ApiResponse(data=AdminUserOut.model_validate(user), message="Registration rejected")


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------


@router.get("/posts", response_model=ApiResponse[PageOut[AdminPostOut]])
async def list_posts(
    db: SessionDep,
    viewer: AdminDep,
    category_id: Annotated[int | None, Query(alias="categoryId")] = None,
    author_id: Annotated[int | None, Query(alias="authorId")] = None,
    is_deleted: Annotated[bool | None, Query(alias="isDeleted")] = None,
    is_pinned: Annotated[bool | None, Query(alias="isPinned")] = None,
    is_locked: Annotated[bool | None, Query(alias="isLocked")] = None,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[PageOut[AdminPostOut]]:
    """List posts including soft-deleted ones; authors are never masked here."""
    filters = AdminPostQuery(
        category_id=category_id,
        author_id=author_id,
        is_deleted=is_deleted,
        is_pinned=is_pinned,
        is_locked=is_locked,
        page=page,
        limit=limit,
    )
    result = admin_content.list_posts(db, viewer, filters)
    return ApiResponse(
        data=PageOut(
            items=[AdminPostOut.model_validate(p) for p in result.items],
            pagination=Pagination.from_page(result),
        )
    )


@router.delete("/posts/{post_id}", response_model=ApiResponse[AdminPostOut])
async def delete_post(post_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminPostOut]:
    post = admin_content.delete_post(db, viewer, post_id)
    return ApiResponse(data=AdminPostOut.model_validate(post), message="Post deleted")


@router.post("/posts/{post_id}/restore", response_model=ApiResponse[AdminPostOut])
async def restore_post(post_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminPostOut]:
    post = admin_content.restore_post(db, viewer, post_id)
    return ApiResponse(data=AdminPostOut.model_validate(post), message="Post restored")


@router.delete("/posts/{post_id}/permanent", response_model=ApiResponse[CascadeOut])
async def hard_delete_post(post_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[CascadeOut]:
    """Remove a post and everything hanging off it."""
    result = admin_content.hard_delete_post(db, viewer, post_id)
    return ApiResponse(data=CascadeOut.model_validate(result), message="Post permanently deleted")


@router.post("/posts/{post_id}/pin", response_model=ApiResponse[AdminPostOut])
async def pin_post(post_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminPostOut]:
    return ApiResponse(data=AdminPostOut.model_validate(admin_content.pin_post(db, viewer, post_id)))


@router.post("/posts/{post_id}/unpin", response_model=ApiResponse[AdminPostOut])
async def unpin_post(post_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminPostOut]:
    return ApiResponse(data=AdminPostOut.model_validate(admin_content.unpin_post(db, viewer, post_id)))


@router.post("/posts/{post_id}/lock", response_model=ApiResponse[AdminPostOut])
async def lock_post(post_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminPostOut]:
    return ApiResponse(data=AdminPostOut.model_validate(admin_content.lock_post(db, viewer, post_id)))


@router.post("/posts/{post_id}/unlock", response_model=ApiResponse[AdminPostOut])
async def unlock_post(post_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminPostOut]:
    return ApiResponse(data=AdminPostOut.model_validate(admin_content.unlock_post(db, viewer, post_id)))


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


@router.get("/comments", response_model=ApiResponse[PageOut[AdminCommentOut]])
async def list_comments(
    db: SessionDep,
    viewer: AdminDep,
    post_id: Annotated[int | None, Query(alias="postId")] = None,
    author_id: Annotated[int | None, Query(alias="authorId")] = None,
    is_deleted: Annotated[bool | None, Query(alias="isDeleted")] = None,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[PageOut[AdminCommentOut]]:
    filters = AdminCommentQuery(post_id=post_id, author_id=author_id, is_deleted=is_deleted, page=page, limit=limit)
    result = admin_content.list_comments(db, viewer, filters)
    return ApiResponse(
        data=PageOut(
            items=[AdminCommentOut.model_validate(c) for c in result.items],
            pagination=Pagination.from_page(result),
        )
    )


@router.delete("/comments/{comment_id}", response_model=ApiResponse[AdminCommentOut])
async def delete_comment(comment_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminCommentOut]:
    comment = admin_content.delete_comment(db, viewer, comment_id)
    return ApiResponse(data=AdminCommentOut.model_validate(comment), message="Comment deleted")


@router.post("/comments/{comment_id}/restore", response_model=ApiResponse[AdminCommentOut])
async def restore_comment(comment_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminCommentOut]:
    comment = admin_content.restore_comment(db, viewer, comment_id)
    return ApiResponse(data=AdminCommentOut.model_validate(comment), message="Comment restored")


@router.delete("/comments/{comment_id}/permanent", response_model=ApiResponse[CascadeOut])
async def hard_delete_comment(comment_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[CascadeOut]:
    result = admin_content.hard_delete_comment(db, viewer, comment_id)
    return ApiResponse(data=CascadeOut.model_validate(result), message="Comment permanently deleted")


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


@router.get("/categories", response_model=ApiResponse[list[CategoryOut]])
async def list_categories(db: SessionDep, viewer: AdminDep) -> ApiResponse[list[CategoryOut]]:
    return ApiResponse(data=[CategoryOut.model_validate(c) for c in list_all_categories(db)])


@router.post("/categories", response_model=ApiResponse[CategoryOut], status_code=status.HTTP_201_CREATED)
async def create_category(payload: CategoryCreate, db: SessionDep, viewer: AdminDep) -> ApiResponse[CategoryOut]:
    category = admin_content.create_category(
        db,
        viewer,
        name=payload.name,
        description=payload.description,
        icon=payload.icon,
        sort_order=payload.sort_order,
        is_anonymous=payload.is_anonymous,
    )
    return ApiResponse(data=CategoryOut.model_validate(category), message="Category created")


@router.put("/categories/reorder", response_model=ApiResponse[list[CategoryOut]])
async def reorder_categories(
    payload: CategoryReorder,
    db: SessionDep,
    viewer: AdminDep,
) -> ApiResponse[list[CategoryOut]]:
    categories = admin_content.reorder_categories(db, viewer, payload.category_ids)
    return ApiResponse(data=[CategoryOut.model_validate(c) for c in categories], message="Categories reordered")


@router.put("/categories/{category_id}", response_model=ApiResponse[CategoryOut])
async def update_category(
    category_id: int,
    payload: CategoryUpdate,
    db: SessionDep,
    viewer: AdminDep,
) -> ApiResponse[CategoryOut]:
    category = admin_content.update_category(
        db,
        viewer,
        category_id,
        name=payload.name,
        description=payload.description,
        icon=payload.icon,
        sort_order=payload.sort_order,
        is_anonymous=payload.is_anonymous,
    )
    return ApiResponse(data=CategoryOut.model_validate(category), message="Category updated")


@router.delete("/categories/{category_id}", response_model=ApiResponse[None])
async def delete_category(category_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[None]:
    admin_content.delete_category(db, viewer, category_id)
    return ApiResponse(message="Category deleted")


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@router.get("/resources", response_model=ApiResponse[PageOut[AdminResourceOut]])
async def list_resources(
    db: SessionDep,
    viewer: AdminDep,
    keyword: str | None = None,
    owner_id: Annotated[int | None, Query(alias="ownerId")] = None,
    resource_status: Annotated[ResourceStatusFilter | None, Query(alias="status")] = None,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[PageOut[AdminResourceOut]]:
    """List every resource, private and deleted ones included."""
    filters = AdminResourceQuery(keyword=keyword, owner_id=owner_id, status=resource_status, page=page, limit=limit)
    result = admin_content.list_resources(db, viewer, filters)
    return ApiResponse(
        data=PageOut(
            items=[AdminResourceOut.model_validate(r) for r in result.items],
            pagination=Pagination.from_page(result),
        )
    )


@router.delete("/resources/{resource_id}", response_model=ApiResponse[AdminResourceOut])
async def delete_resource(resource_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminResourceOut]:
    resource = admin_content.delete_resource(db, viewer, resource_id)
    return ApiResponse(data=AdminResourceOut.model_validate(resource), message="Resource deleted")


@router.post("/resources/{resource_id}/restore", response_model=ApiResponse[AdminResourceOut])
async def restore_resource(resource_id: int, db: SessionDep, viewer: AdminDep) -> ApiResponse[AdminResourceOut]:
    resource = admin_content.restore_resource(db, viewer, resource_id)
    return ApiResponse(data=AdminResourceOut.model_validate(resource), message="Resource restored")


# ---------------------------------------------------------------------------
# Audit log and dashboard
# ---------------------------------------------------------------------------


@router.get("/logs", response_model=ApiResponse[PageOut[AdminLogOut]])
async def list_logs(
    db: SessionDep,
    viewer: AdminDep,
    action: str | None = None,
    target_type: Annotated[str | None, Query(alias="targetType")] = None,
    admin_id: Annotated[int | None, Query(alias="adminId")] = None,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[PageOut[AdminLogOut]]:
    """List audit entries; entries by super admins are hidden from admins."""
    filters = AdminLogQuery(action=action, target_type=target_type, admin_id=admin_id, page=page, limit=limit)
    result = list_admin_logs(db, viewer, filters)
    return ApiResponse(
        data=PageOut(
            items=[AdminLogOut.model_validate(entry) for entry in result.items],
            pagination=Pagination.from_page(result),
        )
    )


@router.get("/stats/overview", response_model=ApiResponse[OverviewOut])
async def get_overview(db: SessionDep, viewer: AdminDep) -> ApiResponse[OverviewOut]:
    return ApiResponse(data=OverviewOut.model_validate(stats.overview(db, viewer)))


@router.get("/stats/users", response_model=ApiResponse[TrendOut])
async def get_user_stats(
    db: SessionDep,
    viewer: AdminDep,
    period: StatsPeriod = StatsPeriod.MONTH,
) -> ApiResponse[TrendOut]:
    """Registrations per day over ``period``."""
    return ApiResponse(data=TrendOut.model_validate(stats.user_trend(db, viewer, period)))


@router.get("/stats/posts", response_model=ApiResponse[TrendOut])
async def get_post_stats(
    db: SessionDep,
    viewer: AdminDep,
    period: StatsPeriod = StatsPeriod.MONTH,
) -> ApiResponse[TrendOut]:
    return ApiResponse(data=TrendOut.model_validate(stats.post_trend(db, period)))


@router.get("/stats/categories", response_model=ApiResponse[CategoryBreakdownOut])
async def get_category_stats(db: SessionDep, viewer: AdminDep) -> ApiResponse[CategoryBreakdownOut]:
    figures = [CategoryFigureOut.model_validate(figure) for figure in stats.category_breakdown(db)]
    return ApiResponse(data=CategoryBreakdownOut(categories=figures, total=len(figures)))


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


@router.get("/reports", response_model=ApiResponse[PageOut[AdminReportOut]])
async def list_reports(
    db: SessionDep,
    viewer: AdminDep,
    report_status: Annotated[ReportStatus | None, Query(alias="status")] = None,
    target_type: Annotated[ReportTargetType | None, Query(alias="targetType")] = None,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[PageOut[AdminReportOut]]:
    """List reports newest first; reports filed by hidden accounts are left out."""
    filters = ReportListQuery(status=report_status, target_type=target_type, page=page, limit=limit)
    result = report_service.list_reports(db, viewer, filters)
    return ApiResponse(
        data=PageOut(
            items=[AdminReportOut.from_entry(entry) for entry in result.items],
            pagination=Pagination.from_page(result),
        )
    )


@router.post("/reports/{report_id}/process", response_model=ApiResponse[None])
async def process_report(
    report_id: int,
    db: SessionDep,
    viewer: AdminDep,
    payload: ReportProcess | None = None,
) -> ApiResponse[None]:
    report_service.process_report(db, viewer, report_id, payload.remark if payload else None)
    return ApiResponse(message="Report processed")
