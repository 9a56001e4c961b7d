# src/campus_forum/api/v1/endpoints/reports.py
"""User-facing report submission."""

from __future__ import annotations

from fastapi import APIRouter, status

from campus_forum.schemas.common import ApiResponse
from campus_forum.schemas.report import ReportCreate, ReportOut
from campus_forum.services import reports as report_service

from ..dependencies import SessionDep, ViewerDep

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("", response_model=ApiResponse[ReportOut], status_code=status.HTTP_201_CREATED)
async def create_report(payload: ReportCreate, db: SessionDep, viewer: ViewerDep) -> ApiResponse[ReportOut]:
    """Report a post or resource for moderation."""
    report = report_service.create_report(
        db,
        viewer,
        target_type=payload.target_type,
        target_id=payload.target_id,
        reason=payload.reason,
    )
    return ApiResponse(data=ReportOut.model_validate(report), message="Report submitted")
