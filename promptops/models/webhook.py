"""Webhook model."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from promptops.models._base import OrganizationBase


class Webhook(OrganizationBase):
    """Outgoing webhook subscription of an organization."""

    __tablename__ = "webhook"

    url: Mapped[str] = mapped_column(String, nullable=False)
    secret: Mapped[str] = mapped_column(String, nullable=False)
    events: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
