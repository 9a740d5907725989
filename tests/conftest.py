"""Common test fixtures and configuration for pytest.

The settings are read when the package is first imported, so the environment is
prepared here before anything from ``promptops`` is loaded. Tests that need a real
database get an in-memory SQLite database with foreign keys enforced.
"""

import os

from cryptography.fernet import Fernet

os.environ.setdefault("ENCRYPTION_KEY", Fernet.generate_key().decode())
os.environ.setdefault("SQLALCHEMY_ASYNC_DATABASE_URI", "sqlite+aiosqlite://")
os.environ.setdefault("STRIPE_ENABLED", "false")

from typing import AsyncGenerator  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from promptops.db.init_db import create_tables  # noqa: E402

# Import all fixtures so they are automatically available for all tests
from tests.fixtures.common import (  # noqa: E402, F401
    api_client,
    ctx,
    no_stream_delay,
    test_api_key,
    test_organization,
    test_project,
    test_prompt,
    test_user,
    test_version,
)


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Provide an in-memory database with every table created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session bound to the in-memory database."""
    session_factory = async_sessionmaker(
        bind=db_engine, autoflush=False, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session


# Mock DB Session for Unit Tests
@pytest.fixture
async def mock_db_session():
    """Provide a mock DB session for unit tests."""
    from unittest.mock import AsyncMock

    mock_session = AsyncMock(spec=AsyncSession)
    yield mock_session
