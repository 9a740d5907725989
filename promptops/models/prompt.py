"""Prompt model."""

from typing import Optional
from uuid import UUID

from sqlalchemy import UUID as SQLUUID
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from promptops.models._base import ProjectBase


class Prompt(ProjectBase):
    """A named prompt whose content lives in immutable versions."""

    __tablename__ = "prompt"

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Plain column: a foreign key here would form a cycle with prompt_version.prompt_id
    current_version_id: Mapped[Optional[UUID]] = mapped_column(SQLUUID, nullable=True)
