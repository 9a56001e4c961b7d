"""Private message Pydantic schemas."""
from __future__ import annotations

from datetime import datetime

from pydantic import Field

from campus_forum.services.messages import Conversation

from .common import CamelModel, PageOut
from .user import UserSummary


class MessageCreate(CamelModel):
    """Schema for sending a message; at least one of content/imageUrl is required."""

    receiver_id: int
    content: str | None = Field(None, description="Text body")
    image_url: str | None = Field(None, description="URL of an uploaded image")


class MessageOut(CamelModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str | None = None
    image_url: str | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime


class ConversationOut(CamelModel):
    counterparty: UserSummary
    last_message: MessageOut
    unread_count: int

    @classmethod
    def from_conversation(cls, conversation: Conversation) -> ConversationOut:
        return cls(
            counterparty=UserSummary.model_validate(conversation.counterparty),
            last_message=MessageOut.model_validate(conversation.last_message),
            unread_count=conversation.unread_count,
        )


class ConversationDetailOut(CamelModel):
    counterparty: UserSummary
    messages: PageOut[MessageOut]


class UnreadCountOut(CamelModel):
    count: int
