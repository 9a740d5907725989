"""Health check endpoints."""

from fastapi import Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from promptops.api import deps
from promptops.api.router import TrailingSlashRouter

router = TrailingSlashRouter()


@router.get("")
async def health_check() -> dict[str, str]:
    """Check if the API is healthy.

    Returns:
    --------
        dict: A dictionary containing the status of the API.
    """
    return {"status": "healthy"}


@router.get("/db")
async def database_health_check(db: AsyncSession = Depends(deps.get_db)) -> dict[str, str]:
    """Check that the database answers a trivial query."""
    await db.execute(text("SELECT 1"))
    return {"status": "healthy", "database": "reachable"}
