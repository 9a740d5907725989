"""Organization model."""

from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from promptops.core.shared_models import OrganizationPlan
from promptops.models._base import Base

if TYPE_CHECKING:
    from promptops.models.billing import Billing
    from promptops.models.membership import Membership


class Organization(Base):
    """Organization model, the unit of tenant isolation."""

    __tablename__ = "organization"

    name: Mapped[str] = mapped_column(String, nullable=False)
    slug: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    owner_user_id: Mapped[UUID] = mapped_column(ForeignKey("user.id"), nullable=False)

    # Mirrors billing.plan; both are written together by the billing service
    plan: Mapped[str] = mapped_column(
        String(20), default=OrganizationPlan.FREE.value, nullable=False
    )

    memberships: Mapped[List["Membership"]] = relationship(
        "Membership",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload",
    )

    billing: Mapped[Optional["Billing"]] = relationship(
        "Billing",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="noload",
        uselist=False,
    )
