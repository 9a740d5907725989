"""Chat session model."""

from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from promptops.models._base import ProjectBase


class ChatSession(ProjectBase):
    """Conversation of a user with a model inside a project."""

    __tablename__ = "chat_session"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    model: Mapped[str] = mapped_column(String, nullable=False)

    # Reassign rather than mutate in place, JSON columns do not track item changes
    messages: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
