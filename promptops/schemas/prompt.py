"""Prompt and prompt version schemas."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class PromptBase(BaseModel):
    """Prompt base schema."""

    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None


class PromptCreate(PromptBase):
    """Prompt creation schema."""

    project_id: UUID


class PromptUpdate(BaseModel):
    """Prompt update schema."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None


class Prompt(PromptBase):
    """Prompt schema."""

    model_config = {"from_attributes": True}

    id: UUID
    project_id: UUID
    current_version_id: Optional[UUID] = None
    created_at: datetime
    modified_at: datetime


class PromptVersionCreate(BaseModel):
    """Prompt version creation schema."""

    prompt_id: UUID
    version: str = Field(..., min_length=1, max_length=50)
    content: str
    variables: Dict[str, Any] = Field(default_factory=dict)
    test_inputs: Dict[str, Any] = Field(default_factory=dict)
    commit_message: Optional[str] = None
    created_by: Optional[UUID] = None


class PromptVersion(BaseModel):
    """Prompt version schema."""

    model_config = {"from_attributes": True}

    id: UUID
    prompt_id: UUID
    version: str
    content: str
    variables: Dict[str, Any]
    test_inputs: Dict[str, Any]
    commit_message: Optional[str] = None
    created_by: Optional[UUID] = None
    created_at: datetime


class PromptVersionPromote(BaseModel):
    """Request to make a version the current one of its prompt."""

    version_id: UUID


class PromptVersionComparison(BaseModel):
    """Side-by-side view of two versions of the same prompt."""

    version1: PromptVersion
    version2: PromptVersion
    diff: str
