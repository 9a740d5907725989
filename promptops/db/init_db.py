"""Schema creation for local development."""

from sqlalchemy.ext.asyncio import AsyncEngine

from promptops.core.logging import logger
from promptops.models import Base


async def create_tables(engine: AsyncEngine) -> None:
    """Create every missing table from the model metadata.

    Deployed databases are migrated with alembic instead.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created")
