"""User schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    """Base schema for User."""

    email: EmailStr
    name: str = Field(..., min_length=1, max_length=200)
    avatar_url: Optional[str] = None


class UserCreate(UserBase):
    """Schema for creating a User object."""

    pass


class UserUpdate(BaseModel):
    """Schema for updating a User object. Only provided fields are changed."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    avatar_url: Optional[str] = None


class UserInDBBase(UserBase):
    """Base schema for User stored in DB."""

    model_config = {"from_attributes": True}

    id: UUID
    created_at: datetime
    modified_at: datetime
    last_login_at: Optional[datetime] = None


class User(UserInDBBase):
    """Schema for User."""

    pass
