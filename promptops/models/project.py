"""Project model."""

from typing import Optional

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from promptops.models._base import OrganizationBase


class Project(OrganizationBase):
    """A workspace inside an organization holding prompts, runs, pipelines and chats."""

    __tablename__ = "project"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
