"""Webhook schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, HttpUrl


class WebhookCreate(BaseModel):
    """Webhook creation schema."""

    url: HttpUrl
    events: list[str] = Field(default_factory=list)


class Webhook(BaseModel):
    """Webhook schema, including the signing secret."""

    model_config = {"from_attributes": True}

    id: UUID
    organization_id: UUID
    url: str
    secret: str
    events: list[str]
    created_at: datetime
