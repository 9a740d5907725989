"""Chat session schemas."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ChatSessionCreate(BaseModel):
    """Chat session creation schema."""

    project_id: UUID
    user_id: UUID
    title: Optional[str] = None
    model: str = Field(..., min_length=1)


class ChatSessionUpdate(BaseModel):
    """Replacement message list for a session."""

    messages: list[Dict[str, Any]]


class ChatSession(BaseModel):
    """Chat session schema."""

    model_config = {"from_attributes": True}

    id: UUID
    project_id: UUID
    user_id: UUID
    title: Optional[str] = None
    model: str
    messages: list[Dict[str, Any]]
    created_at: datetime
    modified_at: datetime


class ChatMessageCreate(BaseModel):
    """A user message sent to a chat session."""

    content: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
