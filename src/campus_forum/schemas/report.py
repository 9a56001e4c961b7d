"""Report Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field

from campus_forum.models import ReportStatus, ReportTargetType
from campus_forum.services.reports import ReportEntry

from .common import CamelModel


class ReportCreate(CamelModel):
    target_type: ReportTargetType
    target_id: int
    reason: str = Field(..., description="Why the content is being reported")


class ReportOut(CamelModel):
    id: int
    reporter_id: int
    target_type: ReportTargetType
    target_id: int
    reason: str
    status: ReportStatus
    created_at: datetime


class ReporterOut(CamelModel):
    id: int
    username: str
    email: str | None = None


class AdminReportOut(ReportOut):
    processed_by: int | None = None
    processed_at: datetime | None = None
    remark: str | None = None
    reporter: ReporterOut

    @classmethod
    def from_entry(cls, entry: ReportEntry) -> AdminReportOut:
        report = entry.report
        return cls(
            id=report.id,
            reporter_id=report.reporter_id,
            target_type=report.target_type,
            target_id=report.target_id,
            reason=report.reason,
            status=report.status,
            created_at=report.created_at,
            processed_by=report.processed_by,
            processed_at=report.processed_at,
            remark=report.remark,
            reporter=ReporterOut.model_validate(entry.reporter),
        )


class ReportProcess(CamelModel):
    remark: str | None = Field(None, max_length=500)
