"""Project schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ProjectBase(BaseModel):
    """Project base schema."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class ProjectCreate(ProjectBase):
    """Project creation schema."""

    organization_id: UUID


class ProjectUpdate(BaseModel):
    """Project update schema."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    tags: Optional[list[str]] = None


class Project(ProjectBase):
    """Project schema."""

    model_config = {"from_attributes": True}

    id: UUID
    organization_id: UUID
    created_at: datetime
    modified_at: datetime
