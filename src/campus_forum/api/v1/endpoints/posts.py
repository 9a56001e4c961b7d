# src/campus_forum/api/v1/endpoints/posts.py
"""Post, post-interaction and comment-thread endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from campus_forum.schemas.comment import CommentCreate, CommentOut
from campus_forum.schemas.common import ApiResponse, PageOut, Pagination
from campus_forum.schemas.interaction import FavoriteState, LikeState
from campus_forum.schemas.post import PostCreate, PostOut, PostUpdate
from campus_forum.services import comments as comment_service
from campus_forum.services import posts as post_service
from campus_forum.services.toggles import Relation, activate, deactivate

from ..dependencies import LimitParam, OptionalViewerDep, PageParam, SessionDep, ViewerDep

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=ApiResponse[PageOut[PostOut]])
async def list_posts(
    db: SessionDep,
    viewer: OptionalViewerDep,
    category_id: Annotated[int | None, Query(alias="categoryId")] = None,
    author_id: Annotated[int | None, Query(alias="authorId")] = None,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[PageOut[PostOut]]:
    """List live posts, pinned first."""
    result = post_service.list_posts(
        db, viewer, category_id=category_id, author_id=author_id, page=page, limit=limit
    )
    return ApiResponse(
        data=PageOut(
            items=[PostOut.from_view(view) for view in result.items],
            pagination=Pagination.from_page(result),
        )
    )


@router.post("", response_model=ApiResponse[PostOut], status_code=status.HTTP_201_CREATED)
async def create_post(payload: PostCreate, db: SessionDep, viewer: ViewerDep) -> ApiResponse[PostOut]:
    """Publish a new post."""
    view = post_service.create_post(
        db, viewer, category_id=payload.category_id, title=payload.title, content=payload.content
    )
    return ApiResponse(data=PostOut.from_view(view), message="Post created")


@router.get("/{post_id}", response_model=ApiResponse[PostOut])
async def get_post(post_id: int, db: SessionDep, viewer: OptionalViewerDep) -> ApiResponse[PostOut]:
    """Return a post and count the view."""
    return ApiResponse(data=PostOut.from_view(post_service.get_post_detail(db, viewer, post_id)))


@router.put("/{post_id}", response_model=ApiResponse[PostOut])
async def update_post(
    post_id: int,
    payload: PostUpdate,
    db: SessionDep,
    viewer: ViewerDep,
) -> ApiResponse[PostOut]:
    view = post_service.update_post(db, viewer, post_id, title=payload.title, content=payload.content)
    return ApiResponse(data=PostOut.from_view(view), message="Post updated")


@router.delete("/{post_id}", response_model=ApiResponse[None])
async def delete_post(post_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[None]:
    post_service.delete_post(db, viewer, post_id)
    return ApiResponse(message="Post deleted")


@router.post("/{post_id}/like", response_model=ApiResponse[LikeState])
async def like_post(post_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[LikeState]:
    result = activate(db, viewer, Relation.LIKE_POST, post_id)
    return ApiResponse(data=LikeState(is_liked=True, like_count=result.count), message="Liked")


@router.delete("/{post_id}/like", response_model=ApiResponse[LikeState])
async def unlike_post(post_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[LikeState]:
    result = deactivate(db, viewer, Relation.LIKE_POST, post_id)
    return ApiResponse(data=LikeState(is_liked=False, like_count=result.count), message="Like removed")


@router.post("/{post_id}/favorite", response_model=ApiResponse[FavoriteState])
async def favorite_post(post_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[FavoriteState]:
    result = activate(db, viewer, Relation.FAVORITE_POST, post_id)
    return ApiResponse(data=FavoriteState(is_favorited=True, favorite_count=result.count), message="Favorited")


@router.delete("/{post_id}/favorite", response_model=ApiResponse[FavoriteState])
async def unfavorite_post(post_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[FavoriteState]:
    result = deactivate(db, viewer, Relation.FAVORITE_POST, post_id)
    return ApiResponse(
        data=FavoriteState(is_favorited=False, favorite_count=result.count),
        message="Favorite removed",
    )


@router.get("/{post_id}/comments", response_model=ApiResponse[PageOut[CommentOut]])
async def list_comments(
    post_id: int,
    db: SessionDep,
    viewer: OptionalViewerDep,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[PageOut[CommentOut]]:
    result = comment_service.list_comments(db, viewer, post_id, page=page, limit=limit)
    return ApiResponse(
        data=PageOut(
            items=[CommentOut.from_view(view) for view in result.items],
            pagination=Pagination.from_page(result),
        )
    )


@router.post(
    "/{post_id}/comments",
    response_model=ApiResponse[CommentOut],
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: int,
    payload: CommentCreate,
    db: SessionDep,
    viewer: ViewerDep,
) -> ApiResponse[CommentOut]:
    view = comment_service.create_comment(
        db, viewer, post_id, content=payload.content, parent_id=payload.parent_id
    )
    return ApiResponse(data=CommentOut.from_view(view), message="Comment created")
