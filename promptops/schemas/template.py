"""Template schemas."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class TemplateCreate(BaseModel):
    """Organization template creation schema."""

    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    content: Dict[str, Any] = Field(default_factory=dict)


class Template(BaseModel):
    """Template schema."""

    model_config = {"from_attributes": True}

    id: UUID
    organization_id: Optional[UUID] = None
    name: str
    category: str
    content: Dict[str, Any]
    created_at: datetime


class TemplateInstall(BaseModel):
    """Install a template as a new prompt of a project."""

    project_id: UUID
    created_by: Optional[UUID] = None


class TemplateInstallResult(BaseModel):
    """Prompt and first version created by a template installation."""

    prompt_id: UUID
    version_id: UUID
