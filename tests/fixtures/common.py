"""Common test fixtures."""

import uuid
from typing import AsyncGenerator

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from promptops import crud, schemas
from promptops.api import deps
from promptops.api.context import RequestContext
from promptops.core.api_key_service import api_key_service
from promptops.core.config import settings
from promptops.core.logging import logger
from promptops.core.organization_service import organization_service
from promptops.main import app


@pytest.fixture
def ctx() -> RequestContext:
    """Create a request context for calling services directly."""
    request_id = str(uuid.uuid4())
    return RequestContext(
        request_id=request_id, logger=logger.with_context(request_id=request_id)
    )


@pytest.fixture
def no_stream_delay(monkeypatch):
    """Stream chat replies without pausing between chunks."""
    monkeypatch.setattr(settings, "CHAT_STREAM_DELAY_SECONDS", 0)


@pytest.fixture
async def test_user(db_session: AsyncSession):
    """Create a user in the test database."""
    return await crud.user.create(
        db_session,
        obj_in=schemas.UserCreate(email="ada@example.com", name="Ada Lovelace"),
    )


@pytest.fixture
async def test_organization(db_session: AsyncSession, test_user, ctx):
    """Create an organization owned by the test user."""
    return await organization_service.create_organization(
        db_session,
        organization_in=schemas.OrganizationCreate(
            name="Analytical Engines", slug="analytical-engines", owner_user_id=test_user.id
        ),
        ctx=ctx,
    )


@pytest.fixture
async def test_project(db_session: AsyncSession, test_organization):
    """Create a project in the test organization."""
    return await crud.project.create(
        db_session,
        obj_in={
            "organization_id": test_organization.id,
            "name": "Support Bot",
            "description": "Customer support prompts",
            "tags": ["support"],
        },
    )


@pytest.fixture
async def test_prompt(db_session: AsyncSession, test_project):
    """Create a prompt in the test project."""
    return await crud.prompt.create(
        db_session,
        obj_in={"project_id": test_project.id, "name": "Greeting", "description": "Says hi"},
    )


@pytest.fixture
async def test_version(db_session: AsyncSession, test_prompt, test_user):
    """Create a first version of the test prompt."""
    return await crud.prompt_version.create(
        db_session,
        obj_in={
            "prompt_id": test_prompt.id,
            "version": "1.0.0",
            "content": "Hello {{name}}\nHow can I help?\n",
            "variables": {"name": "string"},
            "test_inputs": {"name": "Ada"},
            "commit_message": "Initial version",
            "created_by": test_user.id,
        },
    )


@pytest.fixture
async def test_api_key(db_session: AsyncSession, test_organization, ctx):
    """Create an API key for the test organization, including its plaintext token."""
    return await api_key_service.create_api_key(
        db_session,
        organization_id=test_organization.id,
        key_in=schemas.APIKeyCreate(label="CI"),
        ctx=ctx,
    )


@pytest.fixture
async def api_client(db_session: AsyncSession) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create an HTTP client for the app that shares the test database session."""

    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[deps.get_db] = _get_test_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()
