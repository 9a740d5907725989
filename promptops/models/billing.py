"""Billing model."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from promptops.core.shared_models import OrganizationPlan
from promptops.models._base import Base

if TYPE_CHECKING:
    from promptops.models.organization import Organization


class Billing(Base):
    """Subscription state of an organization (one row per organization)."""

    __tablename__ = "billing"

    organization_id: Mapped[UUID] = mapped_column(
        ForeignKey("organization.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    stripe_customer_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    plan: Mapped[str] = mapped_column(
        String(20), default=OrganizationPlan.FREE.value, nullable=False
    )

    # Snapshot of the plan defaults at the time of the last plan change
    seats: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    metered_quota: Mapped[int] = mapped_column(Integer, default=1000, nullable=False)
    renews_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="billing", lazy="noload"
    )
