# src/campus_forum/api/v1/endpoints/comments.py
"""Comment editing, deletion and likes."""

from __future__ import annotations

from fastapi import APIRouter

from campus_forum.schemas.comment import CommentOut, CommentUpdate
from campus_forum.schemas.common import ApiResponse
from campus_forum.schemas.interaction import LikeState
from campus_forum.services import comments as comment_service
from campus_forum.services.toggles import Relation, activate, deactivate

from ..dependencies import SessionDep, ViewerDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.put("/{comment_id}", response_model=ApiResponse[CommentOut])
async def update_comment(
    comment_id: int,
    payload: CommentUpdate,
    db: SessionDep,
    viewer: ViewerDep,
) -> ApiResponse[CommentOut]:
    """Edit one of the viewer's comments."""
    view = comment_service.update_comment(db, viewer, comment_id, content=payload.content)
    return ApiResponse(data=CommentOut.from_view(view), message="Comment updated")


@router.delete("/{comment_id}", response_model=ApiResponse[None])
async def delete_comment(comment_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[None]:
    comment_service.delete_comment(db, viewer, comment_id)
    return ApiResponse(message="Comment deleted")


@router.post("/{comment_id}/like", response_model=ApiResponse[LikeState])
async def like_comment(comment_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[LikeState]:
    result = activate(db, viewer, Relation.LIKE_COMMENT, comment_id)
    return ApiResponse(data=LikeState(is_liked=True, like_count=result.count), message="Liked")


@router.delete("/{comment_id}/like", response_model=ApiResponse[LikeState])
async def unlike_comment(comment_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[LikeState]:
    result = deactivate(db, viewer, Relation.LIKE_COMMENT, comment_id)
    return ApiResponse(data=LikeState(is_liked=False, like_count=result.count), message="Like removed")
