"""Organization and membership schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from promptops.core.shared_models import MembershipRole, OrganizationPlan


class OrganizationBase(BaseModel):
    """Organization base schema."""

    name: str = Field(..., min_length=1, max_length=100, description="Organization name")
    slug: str = Field(
        ...,
        min_length=1,
        max_length=100,
        pattern=r"^[a-z0-9][a-z0-9-]*$",
        description="URL-safe unique organization handle",
    )


class OrganizationCreate(OrganizationBase):
    """Organization creation schema."""

    owner_user_id: UUID
    plan: OrganizationPlan = OrganizationPlan.FREE


class OrganizationUpdate(BaseModel):
    """Organization update schema."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(
        None, min_length=1, max_length=100, pattern=r"^[a-z0-9][a-z0-9-]*$"
    )
    plan: Optional[OrganizationPlan] = None


class Organization(OrganizationBase):
    """Organization schema."""

    model_config = {"from_attributes": True}

    id: UUID
    owner_user_id: UUID
    plan: OrganizationPlan
    created_at: datetime
    modified_at: datetime


class MembershipCreate(BaseModel):
    """Membership creation schema."""

    organization_id: UUID
    user_id: UUID
    role: MembershipRole


class MembershipUpdate(BaseModel):
    """Membership update schema."""

    role: MembershipRole


class Membership(BaseModel):
    """Membership schema."""

    model_config = {"from_attributes": True}

    id: UUID
    organization_id: UUID
    user_id: UUID
    role: MembershipRole
    created_at: datetime
