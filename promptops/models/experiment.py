"""Experiment model."""

from uuid import UUID

from sqlalchemy import JSON, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from promptops.core.shared_models import ExperimentStatus
from promptops.models._base import Base


class Experiment(Base):
    """A/B test comparing named variants of a prompt."""

    __tablename__ = "experiment"

    prompt_id: Mapped[UUID] = mapped_column(
        ForeignKey("prompt.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=ExperimentStatus.DRAFT.value, nullable=False
    )
    variants: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
