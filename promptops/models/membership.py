"""Membership model linking users to organizations with a role."""

from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from promptops.models._base import OrganizationBase

if TYPE_CHECKING:
    from promptops.models.organization import Organization
    from promptops.models.user import User


class Membership(OrganizationBase):
    """Many-to-many relationship between users and organizations with roles."""

    __tablename__ = "membership"
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_membership_org_user"),
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String(20), nullable=False)  # owner, admin, editor, viewer

    user: Mapped["User"] = relationship("User", back_populates="memberships", lazy="noload")
    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="memberships", lazy="noload"
    )
