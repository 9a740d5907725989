"""Run model."""

from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from promptops.models._base import ProjectBase


class Run(ProjectBase):
    """One recorded execution of a prompt version against a model.

    Runs are append-only and are the unit of usage accounting.
    """

    __tablename__ = "run"
    __table_args__ = (Index("ix_run_project_created", "project_id", "created_at"),)

    prompt_id: Mapped[UUID] = mapped_column(
        ForeignKey("prompt.id", ondelete="CASCADE"), nullable=False
    )
    version_id: Mapped[UUID] = mapped_column(
        ForeignKey("prompt_version.id", ondelete="CASCADE"), nullable=False
    )
    experiment_id: Mapped[Optional[UUID]] = mapped_column(
        ForeignKey("experiment.id", ondelete="SET NULL"), nullable=True
    )
    model: Mapped[str] = mapped_column(String, nullable=False)
    input: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    output: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    tokens_in: Mapped[int] = mapped_column(Integer, nullable=False)
    tokens_out: Mapped[int] = mapped_column(Integer, nullable=False)
    cost_usd: Mapped[Decimal] = mapped_column(Numeric(10, 6), nullable=False)
    latency_ms: Mapped[int] = mapped_column(Integer, nullable=False)
    success: Mapped[bool] = mapped_column(Boolean, nullable=False)
    flags: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
