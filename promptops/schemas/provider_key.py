"""Provider key schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from promptops.core.shared_models import ProviderType


class ProviderKeyCreate(BaseModel):
    """Provider key creation schema. ``api_key`` is the raw key before encryption."""

    organization_id: UUID
    provider: ProviderType
    label: str = Field(..., min_length=1, max_length=200)
    api_key: str = Field(..., min_length=1)


class ProviderKey(BaseModel):
    """Provider key schema. The key itself is never returned."""

    model_config = {"from_attributes": True}

    id: UUID
    organization_id: UUID
    provider: ProviderType
    label: str
    created_at: datetime


class ProviderKeyTest(BaseModel):
    """Credentials to check against a provider."""

    provider: str
    api_key: str


class ProviderKeyTestResult(BaseModel):
    """Outcome of a provider key check."""

    valid: bool
    error: Optional[str] = None
