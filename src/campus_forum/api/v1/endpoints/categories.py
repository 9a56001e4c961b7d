# src/campus_forum/api/v1/endpoints/categories.py
"""Public category listing."""

from __future__ import annotations

from fastapi import APIRouter

from campus_forum.schemas.common import ApiResponse
from campus_forum.schemas.post import CategoryOut
from campus_forum.services.posts import list_categories as list_all_categories

from ..dependencies import SessionDep

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=ApiResponse[list[CategoryOut]])
async def list_categories(db: SessionDep) -> ApiResponse[list[CategoryOut]]:
    """Return every category in display order."""
    return ApiResponse(data=[CategoryOut.model_validate(c) for c in list_all_categories(db)])
