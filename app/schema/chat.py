"""
Chat schemas: chats, messages, participants.
"""
from datetime import datetime
from typing import List, Optional
import uuid
from pydantic import BaseModel, Field


# --- Message ---

class MessageCreateBody(BaseModel):
    """Body for POST /chats/event/{event_id}/message."""
    content: str = Field(..., min_length=1, max_length=10_000)


class MessageResponse(BaseModel):
    """Single message."""
    id: uuid.UUID
    chat_id: uuid.UUID
    sender_id: uuid.UUID
    sender_first_name: Optional[str] = None
    sender_last_name: Optional[str] = None
    content: str
    created_at: datetime


class MessageListResponse(BaseModel):
    """Paginated messages for a chat, newest first."""
    items: List[MessageResponse]
    page: int = Field(..., description="Current page (1-based).")
    limit: int = Field(..., description="Items per page.")
    total: int = Field(..., description="Total messages in chat.")
    total_pages: int = Field(..., description="Total pages.")


# --- Chat ---

class ChatResponse(BaseModel):
    """Chat with last message and the caller's unread count."""
    id: uuid.UUID
    event_id: uuid.UUID
    event_title: str
    initiator_id: uuid.UUID
    initiator_first_name: Optional[str] = None
    initiator_last_name: Optional[str] = None
    participant_ids: List[uuid.UUID] = []
    last_message: Optional[MessageResponse] = None
    last_message_at: Optional[datetime] = None
    unread_count: int = 0


class ChatListResponse(BaseModel):
    """Paginated chat list."""
    items: List[ChatResponse]
    page: int = Field(..., description="Current page (1-based).")
    limit: int = Field(..., description="Items per page.")
    total: int = Field(..., description="Total chats for this user.")
    total_pages: int = Field(..., description="Total pages.")


class ParticipantProfile(BaseModel):
    """Participant profile for GET /chats/{chat_id}/participants."""
    user_id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    avatar_url: Optional[str] = None
    is_active: bool


class UnreadCountResponse(BaseModel):
    count: int
