"""CRUD operations for audit logs."""

from typing import Optional
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.crud._base import CRUDBase
from promptops.db.unit_of_work import UnitOfWork
from promptops.models.audit_log import AuditLog
from promptops.schemas.audit_log import AuditLogCreate


class CRUDAuditLog(CRUDBase[AuditLog, AuditLogCreate, AuditLogCreate]):
    """CRUD operations for audit logs. Entries are append-only."""

    async def create(
        self,
        db: AsyncSession,
        *,
        obj_in: AuditLogCreate,
        uow: Optional[UnitOfWork] = None,
    ) -> AuditLog:
        """Record an audit event, mapping ``metadata`` onto its column attribute."""
        data = obj_in.model_dump()
        data["event_metadata"] = data.pop("metadata")
        return await super().create(db, obj_in=data, uow=uow)

    async def get_multi_by_organization(
        self, db: AsyncSession, *, organization_id: UUID, limit: int = 50, offset: int = 0
    ) -> list[AuditLog]:
        """Get the audit trail of an organization, newest first."""
        query = (
            select(AuditLog)
            .where(AuditLog.organization_id == organization_id)
            .order_by(desc(AuditLog.created_at))
            .offset(offset)
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_multi_by_actor(
        self, db: AsyncSession, *, actor_user_id: UUID, limit: int = 50
    ) -> list[AuditLog]:
        """Get the actions performed by a user, newest first."""
        query = (
            select(AuditLog)
            .where(AuditLog.actor_user_id == actor_user_id)
            .order_by(desc(AuditLog.created_at))
            .limit(limit)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_multi_by_target(
        self, db: AsyncSession, *, target_type: str, target_id: str
    ) -> list[AuditLog]:
        """Get the history of one target object, newest first."""
        query = (
            select(AuditLog)
            .where(AuditLog.target_type == target_type, AuditLog.target_id == target_id)
            .order_by(desc(AuditLog.created_at))
        )
        result = await db.execute(query)
        return list(result.scalars().all())


audit_log = CRUDAuditLog(AuditLog)
