"""Template model."""

from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from promptops.models._base import Base


class Template(Base):
    """Reusable prompt template. Templates without an organization are public."""

    __tablename__ = "template"

    organization_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("organization.id", ondelete="CASCADE"), nullable=True
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False, index=True)
    content: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
