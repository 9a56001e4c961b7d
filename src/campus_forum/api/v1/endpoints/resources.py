# src/campus_forum/api/v1/endpoints/resources.py
"""Shared learning-resource endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from campus_forum.schemas.common import ApiResponse, PageOut, Pagination
from campus_forum.schemas.resource import DownloadOut, ResourceCreate, ResourceOut
from campus_forum.services import resources as resource_service
from campus_forum.services.visibility import ResourceListQuery

from ..dependencies import LimitParam, OptionalViewerDep, PageParam, SessionDep, ViewerDep

router = APIRouter(prefix="/resources", tags=["resources"])


@router.get("", response_model=ApiResponse[PageOut[ResourceOut]])
async def list_resources(
    db: SessionDep,
    viewer: OptionalViewerDep,
    owner_id: Annotated[int | None, Query(alias="ownerId")] = None,
    only_mine: Annotated[bool, Query(alias="onlyMine")] = False,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[PageOut[ResourceOut]]:
    """List public resources plus the viewer's own private ones."""
    filters = ResourceListQuery(owner_id=owner_id, only_mine=only_mine, page=page, limit=limit)
    result = resource_service.list_resources(db, viewer, filters)
    return ApiResponse(
        data=PageOut(
            items=[ResourceOut.model_validate(r) for r in result.items],
            pagination=Pagination.from_page(result),
        )
    )


@router.post("", response_model=ApiResponse[ResourceOut], status_code=status.HTTP_201_CREATED)
async def create_resource(payload: ResourceCreate, db: SessionDep, viewer: ViewerDep) -> ApiResponse[ResourceOut]:
    resource = resource_service.create_resource(
        db,
        viewer,
        title=payload.title,
        file_url=payload.file_url,
        file_name=payload.file_name,
        file_size=payload.file_size,
        description=payload.description,
        is_public=payload.is_public,
    )
    return ApiResponse(data=ResourceOut.model_validate(resource), message="Resource shared")


@router.get("/{resource_id}", response_model=ApiResponse[ResourceOut])
async def get_resource(resource_id: int, db: SessionDep, viewer: OptionalViewerDep) -> ApiResponse[ResourceOut]:
    return ApiResponse(data=ResourceOut.model_validate(resource_service.get_resource(db, viewer, resource_id)))


@router.post("/{resource_id}/download", response_model=ApiResponse[DownloadOut])
async def download_resource(
    resource_id: int,
    db: SessionDep,
    viewer: OptionalViewerDep,
) -> ApiResponse[DownloadOut]:
    """Count a download and return where to fetch the file."""
    resource = resource_service.download_resource(db, viewer, resource_id)
    return ApiResponse(data=DownloadOut.model_validate(resource))


@router.delete("/{resource_id}", response_model=ApiResponse[None])
async def delete_resource(resource_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[None]:
    resource_service.delete_resource(db, viewer, resource_id)
    return ApiResponse(message="Resource deleted")
