"""The API module that contains the endpoints for audit logs."""

from uuid import UUID

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api import deps
from promptops.api.router import TrailingSlashRouter

router = TrailingSlashRouter()


@router.post("/", response_model=schemas.AuditLog)
async def log_audit_event(
    *, db: AsyncSession = Depends(deps.get_db), event_in: schemas.AuditLogCreate
) -> schemas.AuditLog:
    """Record an audit event."""
    return await crud.audit_log.create(db, obj_in=event_in)


@router.get("/organization/{organization_id}", response_model=list[schemas.AuditLog])
async def read_organization_audit_logs(
    *,
    db: AsyncSession = Depends(deps.get_db),
    organization_id: UUID,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> list[schemas.AuditLog]:
    """Page through the audit trail of an organization, newest first."""
    return await crud.audit_log.get_multi_by_organization(
        db, organization_id=organization_id, limit=limit, offset=offset
    )


@router.get("/user/{user_id}", response_model=list[schemas.AuditLog])
async def read_user_audit_logs(
    *,
    db: AsyncSession = Depends(deps.get_db),
    user_id: UUID,
    limit: int = Query(50, ge=1, le=500),
) -> list[schemas.AuditLog]:
    """List the actions of a user, newest first."""
    return await crud.audit_log.get_multi_by_actor(db, actor_user_id=user_id, limit=limit)


@router.get("/target/{target_type}/{target_id}", response_model=list[schemas.AuditLog])
async def read_target_audit_logs(
    *, db: AsyncSession = Depends(deps.get_db), target_type: str, target_id: str
) -> list[schemas.AuditLog]:
    """List the history of one object."""
    return await crud.audit_log.get_multi_by_target(
        db, target_type=target_type, target_id=target_id
    )
