"""API key model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from promptops.models._base import OrganizationBase


class APIKey(OrganizationBase):
    """Organization API key. Only the sha256 hash of the token is stored."""

    __tablename__ = "api_key"

    label: Mapped[str] = mapped_column(String, nullable=False)
    token_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    scopes: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    last_used_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
