"""Prompt version model."""

from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from promptops.models._base import Base


class PromptVersion(Base):
    """Immutable snapshot of a prompt's content."""

    __tablename__ = "prompt_version"

    prompt_id: Mapped[UUID] = mapped_column(
        ForeignKey("prompt.id", ondelete="CASCADE"), nullable=False
    )
    version: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    variables: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    test_inputs: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    commit_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Null for versions created by template installation
    created_by: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("user.id", ondelete="SET NULL"), nullable=True
    )
