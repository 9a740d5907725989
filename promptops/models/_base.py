"""Base models for the application."""

from sqlalchemy import UUID, Column, DateTime, ForeignKey
from sqlalchemy.ext.declarative import declared_attr
from sqlalchemy.orm import DeclarativeBase

from promptops.core.datetime_utils import utc_now_naive
from promptops.core.identifiers import new_id


class Base(DeclarativeBase):
    """Base class for all models."""

    id = Column(UUID, primary_key=True, default=new_id, nullable=False)
    created_at = Column(DateTime, default=utc_now_naive, nullable=False)
    modified_at = Column(DateTime, default=utc_now_naive, onupdate=utc_now_naive, nullable=False)


class OrganizationBase(Base):
    """Base class for organization-scoped tables."""

    __abstract__ = True

    @declared_attr
    def organization_id(cls):
        """Organization ID column."""
        return Column(UUID, ForeignKey("organization.id", ondelete="CASCADE"), nullable=False)


class ProjectBase(Base):
    """Base class for project-scoped tables."""

    __abstract__ = True

    @declared_attr
    def project_id(cls):
        """Project ID column."""
        return Column(UUID, ForeignKey("project.id", ondelete="CASCADE"), nullable=False)
