# src/campus_forum/services/reports.py
"""User reports against posts and resources, and their handling by admins."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from campus_forum.core.errors import AlreadyExistsError, NotFoundError, ValidationError
from campus_forum.core.settings import settings
from campus_forum.db.session import atomic
from campus_forum.db.time import utcnow
from campus_forum.models import (
    AdminAction,
    AdminTargetType,
    Post,
    Report,
    ReportStatus,
    ReportTargetType,
    User,
)
from campus_forum.services.audit import AuditLog
from campus_forum.services.pagination import Page, paginate
from campus_forum.services.visibility import (
    ReportListQuery,
    ViewerContext,
    build_report_query,
    get_visible_resource,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportEntry:
    report: Report
    reporter: User


def _require_live_target(db: Session, viewer: ViewerContext, target_type: ReportTargetType, target_id: int) -> None:
    if target_type is ReportTargetType.POST:
        post = db.get(Post, target_id)
        if post is None or post.is_deleted:
            raise NotFoundError("Post not found")
    else:
        # Private resources of other users cannot be reported because they cannot be seen.
        get_visible_resource(db, viewer, target_id)


def create_report(
    db: Session,
    viewer: ViewerContext,
    *,
    target_type: ReportTargetType,
    target_id: int,
    reason: str,
) -> Report:
    """File a report; a reporter keeps at most one pending report per target.

    Raises:
        ValidationError: Reason too short or too long.
        NotFoundError: The target is missing, deleted or not visible to the reporter.
        AlreadyExistsError: The reporter already has a pending report on the target.
    """
    reason = (reason or "").strip()
    if len(reason) < settings.min_report_reason_length:
        raise ValidationError(f"Reason must be at least {settings.min_report_reason_length} characters")
    if len(reason) > settings.max_report_reason_length:
        raise ValidationError(f"Reason cannot exceed {settings.max_report_reason_length} characters")

    _require_live_target(db, viewer, target_type, target_id)

    pending = (
        db.query(Report)
        .filter(
            Report.reporter_id == viewer.user_id,
            Report.target_type == target_type.value,
            Report.target_id == target_id,
            Report.status == ReportStatus.PENDING.value,
        )
        .first()
    )
    if pending is not None:
        raise AlreadyExistsError("You have already reported this content")

    with atomic(db):
        report = Report(
            reporter_id=viewer.user_id,
            target_type=target_type.value,
            target_id=target_id,
            reason=reason,
        )
        db.add(report)
    logger.info("User %s reported %s %s", viewer.user_id, target_type.value, target_id)
    return report


def list_reports(db: Session, viewer: ViewerContext, filters: ReportListQuery) -> Page[ReportEntry]:
    """List reports newest first with their reporters."""
    result = paginate(build_report_query(db, filters, viewer), filters.page, filters.limit)
    return Page(
        items=[ReportEntry(report=report, reporter=reporter) for report, reporter in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
    )


def process_report(db: Session, viewer: ViewerContext, report_id: int, remark: str | None = None) -> Report:
    """Close a pending report.

    Reports filed by accounts hidden from the viewer are NOT_FOUND.
    """
    entry = build_report_query(db, ReportListQuery(), viewer).filter(Report.id == report_id).first()
    if entry is None:
        raise NotFoundError("Report not found")
    report = entry[0]
    if report.status == ReportStatus.PROCESSED.value:
        raise ValidationError("Report has already been processed")

    with atomic(db):
        report.status = ReportStatus.PROCESSED.value
        report.processed_by = viewer.user_id
        report.processed_at = utcnow()
        report.remark = remark.strip() if remark and remark.strip() else None
    AuditLog.record(
        db, viewer.user_id, AdminAction.PROCESS_REPORT, AdminTargetType.REPORT, report.id,
        f"Processed report on {report.target_type} {report.target_id}",
    )
    return report
