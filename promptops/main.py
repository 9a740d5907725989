"""Main module of the FastAPI application.

This module sets up the FastAPI application and the middleware to log incoming requests
and unhandled exceptions.
"""

import os
import subprocess
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from promptops.api.middleware import (
    add_request_id,
    conflict_exception_handler,
    domain_validation_exception_handler,
    exception_logging_middleware,
    external_service_exception_handler,
    integrity_error_handler,
    invalid_state_exception_handler,
    log_requests,
    not_found_exception_handler,
    promptops_exception_handler,
    validation_exception_handler,
)
from promptops.api.router import TrailingSlashRouter
from promptops.api.v1.api import api_router
from promptops.core.config import settings
from promptops.core.exceptions import (
    ConflictException,
    DomainValidationError,
    ExternalServiceError,
    InvalidStateError,
    NotFoundException,
    PromptOpsException,
)
from promptops.core.logging import logger
from promptops.db.init_db import create_tables
from promptops.db.session import async_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events.

    Runs alembic migrations or creates the tables, depending on the settings.
    """
    if settings.RUN_ALEMBIC_MIGRATIONS:
        logger.info("Running alembic migrations...")
        project_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        env = os.environ.copy()
        env["PYTHONPATH"] = project_dir
        subprocess.run(["alembic", "upgrade", "head"], check=True, cwd=project_dir, env=env)
    elif settings.CREATE_TABLES_ON_STARTUP:
        await create_tables(async_engine)

    yield

    await async_engine.dispose()


# Create FastAPI app with our custom router and disable FastAPI's built-in redirects
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url="/openapi.json",
    lifespan=lifespan,
    router=TrailingSlashRouter(),
    redirect_slashes=False,
)

app.include_router(api_router)

# Register middleware directly
app.middleware("http")(add_request_id)
app.middleware("http")(log_requests)
app.middleware("http")(exception_logging_middleware)

# Register exception handlers
app.exception_handler(RequestValidationError)(validation_exception_handler)
app.exception_handler(ValidationError)(validation_exception_handler)
app.exception_handler(NotFoundException)(not_found_exception_handler)
app.exception_handler(InvalidStateError)(invalid_state_exception_handler)
app.exception_handler(DomainValidationError)(domain_validation_exception_handler)
app.exception_handler(ConflictException)(conflict_exception_handler)
app.exception_handler(ExternalServiceError)(external_service_exception_handler)
app.exception_handler(IntegrityError)(integrity_error_handler)
app.exception_handler(PromptOpsException)(promptops_exception_handler)

CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "http://localhost:8080",
]
CORS_ORIGINS.extend(settings.cors_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.ENVIRONMENT == "local" else CORS_ORIGINS,
    allow_credentials=settings.ENVIRONMENT != "local",
    allow_methods=["*"],
    allow_headers=["*"],
)
