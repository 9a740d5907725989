"""Audit log schemas."""

from datetime import datetime
from typing import Any, Dict
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class AuditLogCreate(BaseModel):
    """Audit event to record."""

    organization_id: UUID
    actor_user_id: UUID
    action: str = Field(..., min_length=1)
    target_type: str = Field(..., min_length=1)
    target_id: str = Field(..., min_length=1)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class AuditLog(BaseModel):
    """Audit log schema."""

    model_config = {"from_attributes": True}

    id: UUID
    organization_id: UUID
    actor_user_id: UUID
    action: str
    target_type: str
    target_id: str
    metadata: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("event_metadata", "metadata")
    )
    created_at: datetime
