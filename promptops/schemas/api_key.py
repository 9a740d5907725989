"""API key schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class APIKeyCreate(BaseModel):
    """Schema for creating an APIKey object."""

    label: str = Field(..., min_length=1, max_length=200)
    scopes: list[str] = Field(default_factory=lambda: ["pipelines:execute"])


class APIKey(BaseModel):
    """API key schema without the token."""

    model_config = {"from_attributes": True}

    id: UUID
    organization_id: UUID
    label: str
    scopes: list[str]
    last_used_at: Optional[datetime] = None
    created_at: datetime


class APIKeyWithToken(APIKey):
    """API key returned once at creation, carrying the plaintext token."""

    token: str
