"""Pipeline model."""

from typing import Optional

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from promptops.core.shared_models import PipelineStatus
from promptops.models._base import ProjectBase


class Pipeline(ProjectBase):
    """A graph of processing nodes that can be published behind an endpoint slug."""

    __tablename__ = "pipeline"

    name: Mapped[str] = mapped_column(String, nullable=False)
    graph: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(
        String(20), default=PipelineStatus.DRAFT.value, nullable=False
    )
    endpoint_slug: Mapped[Optional[str]] = mapped_column(String, unique=True, nullable=True)
