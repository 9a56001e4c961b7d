# src/campus_forum/api/v1/endpoints/users.py
"""Public profiles and the follow graph."""

from __future__ import annotations

from fastapi import APIRouter

from campus_forum.schemas.common import ApiResponse, PageOut, Pagination
from campus_forum.schemas.interaction import FollowEntryOut, FollowState
from campus_forum.schemas.user import AdminUserOut, ProfileUpdate, UserProfileOut
from campus_forum.services import follows as follow_service
from campus_forum.services import profiles as profile_service
from campus_forum.services.toggles import Relation, activate, deactivate

from ..dependencies import LimitParam, OptionalViewerDep, PageParam, SessionDep, ViewerDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=ApiResponse[UserProfileOut])
async def get_user_profile(user_id: int, db: SessionDep, viewer: OptionalViewerDep) -> ApiResponse[UserProfileOut]:
    """Return a public profile with follower figures."""
    profile = follow_service.get_profile(db, viewer, user_id)
    user = profile.user
    return ApiResponse(
        data=UserProfileOut(
            id=user.id,
            username=user.username,
            avatar_url=user.avatar_url,
            bio=user.bio,
            follower_count=profile.follower_count,
            following_count=profile.following_count,
            is_following=profile.is_following,
        )
    )


@router.put("/{user_id}", response_model=ApiResponse[AdminUserOut])
async def update_profile(
    user_id: int,
    payload: ProfileUpdate,
    db: SessionDep,
    viewer: ViewerDep,
) -> ApiResponse[AdminUserOut]:
    """Edit your own profile; the full account is returned to its owner."""
    user = profile_service.update_profile(
        db,
        viewer,
        user_id,
        username=payload.username,
        bio=payload.bio,
        avatar_url=payload.avatar_url,
    )
    return ApiResponse(data=AdminUserOut.model_validate(user), message="Profile updated")


@router.post("/{user_id}/follow", response_model=ApiResponse[FollowState])
async def follow_user(user_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[FollowState]:
    activate(db, viewer, Relation.FOLLOW, user_id)
    return ApiResponse(data=FollowState(is_following=True), message="Followed")


@router.delete("/{user_id}/follow", response_model=ApiResponse[FollowState])
async def unfollow_user(user_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[FollowState]:
    deactivate(db, viewer, Relation.FOLLOW, user_id)
    return ApiResponse(data=FollowState(is_following=False), message="Unfollowed")


@router.get("/{user_id}/following", response_model=ApiResponse[PageOut[FollowEntryOut]])
async def list_following(
    user_id: int,
    db: SessionDep,
    viewer: OptionalViewerDep,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[PageOut[FollowEntryOut]]:
    result = follow_service.list_following(db, viewer, user_id, page=page, limit=limit)
    return ApiResponse(
        data=PageOut(
            items=[FollowEntryOut.from_entry(entry) for entry in result.items],
            pagination=Pagination.from_page(result),
        )
    )


@router.get("/{user_id}/followers", response_model=ApiResponse[PageOut[FollowEntryOut]])
async def list_followers(
    user_id: int,
    db: SessionDep,
    viewer: OptionalViewerDep,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[PageOut[FollowEntryOut]]:
    result = follow_service.list_followers(db, viewer, user_id, page=page, limit=limit)
    return ApiResponse(
        data=PageOut(
            items=[FollowEntryOut.from_entry(entry) for entry in result.items],
            pagination=Pagination.from_page(result),
        )
    )
