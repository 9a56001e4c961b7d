# src/campus_forum/api/v1/endpoints/messages.py
"""Private message endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from campus_forum.schemas.common import ApiResponse, PageOut, Pagination
from campus_forum.schemas.message import (
    ConversationDetailOut,
    ConversationOut,
    MessageCreate,
    MessageOut,
    UnreadCountOut,
)
from campus_forum.schemas.user import UserSummary
from campus_forum.services import messages as message_service

from ..dependencies import LimitParam, PageParam, SessionDep, ViewerDep

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/conversations", response_model=ApiResponse[list[ConversationOut]])
async def list_conversations(db: SessionDep, viewer: ViewerDep) -> ApiResponse[list[ConversationOut]]:
    """List the viewer's conversations, most recent activity first."""
    conversations = message_service.list_conversations(db, viewer)
    return ApiResponse(data=[ConversationOut.from_conversation(c) for c in conversations])


@router.get("/conversations/{user_id}", response_model=ApiResponse[ConversationDetailOut])
async def get_conversation(
    user_id: int,
    db: SessionDep,
    viewer: ViewerDep,
    page: PageParam = 1,
    limit: LimitParam = 20,
) -> ApiResponse[ConversationDetailOut]:
    """Return the messages exchanged with ``user_id``, newest first."""
    other, result = message_service.get_conversation(db, viewer, user_id, page=page, limit=limit)
    return ApiResponse(
        data=ConversationDetailOut(
            counterparty=UserSummary.model_validate(other),
            messages=PageOut(
                items=[MessageOut.model_validate(m) for m in result.items],
                pagination=Pagination.from_page(result),
            ),
        )
    )


@router.post("", response_model=ApiResponse[MessageOut], status_code=status.HTTP_201_CREATED)
async def send_message(payload: MessageCreate, db: SessionDep, viewer: ViewerDep) -> ApiResponse[MessageOut]:
    """Send a message to another user."""
    message = message_service.send_message(
        db,
        viewer,
        receiver_id=payload.receiver_id,
        content=payload.content,
        image_url=payload.image_url,
    )
    return ApiResponse(data=MessageOut.model_validate(message), message="Message sent")


@router.put("/{message_id}/read", response_model=ApiResponse[MessageOut])
async def mark_message_read(message_id: int, db: SessionDep, viewer: ViewerDep) -> ApiResponse[MessageOut]:
    message = message_service.mark_message_read(db, viewer, message_id)
    return ApiResponse(data=MessageOut.model_validate(message))


@router.get("/unread-count", response_model=ApiResponse[UnreadCountOut])
async def unread_count(db: SessionDep, viewer: ViewerDep) -> ApiResponse[UnreadCountOut]:
    return ApiResponse(data=UnreadCountOut(count=message_service.unread_message_count(db, viewer)))
