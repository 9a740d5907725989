"""Middleware and exception handlers for the FastAPI application."""

import time
import traceback
import uuid
from typing import Union

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from promptops.core.config import settings
from promptops.core.exceptions import (
    ConflictException,
    DomainValidationError,
    ExternalServiceError,
    InvalidStateError,
    NotFoundException,
    PromptOpsException,
    unpack_validation_error,
)
from promptops.core.logging import logger


async def add_request_id(request: Request, call_next: callable) -> Response:
    """Generate a request ID for tracing and echo it in the response headers.

    Args:
    ----
        request (Request): The incoming request.
        call_next (callable): The next middleware in the chain.

    Returns:
    -------
        Response: The response to the incoming request.

    """
    request.state.request_id = str(uuid.uuid4())
    response = await call_next(request)
    response.headers["X-Request-ID"] = request.state.request_id
    return response


async def log_requests(request: Request, call_next: callable) -> Response:
    """Log method, URL, duration and status of every request."""
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time
    logger.info(
        f"Handled request {request.method} {request.url} in {duration:.2f} seconds. "
        f"Response code: {response.status_code}"
    )
    return response


async def exception_logging_middleware(request: Request, call_next: callable) -> Response:
    """Log unhandled exceptions and turn them into a 500 response.

    Args:
    ----
        request (Request): The incoming request.
        call_next (callable): The next middleware in the chain.

    Returns:
    -------
        Response: The response to the incoming request.

    """
    try:
        return await call_next(request)
    except Exception as exc:
        logger.error(f"Unhandled exception: {exc}\n{traceback.format_exc()}")

        response_content = {
            "detail": f"Internal Server Error: {exc.__class__.__name__}: {str(exc)}"
        }
        if settings.DEBUG:
            response_content["trace"] = traceback.format_exc()

        return JSONResponse(status_code=500, content=response_content)


# Exception handlers
async def validation_exception_handler(
    request: Request, exc: Union[RequestValidationError, ValidationError]
) -> JSONResponse:
    """Exception handler for request data that does not match the schema.

    Example of JSON output:
        {
            "errors": [
                {"body.email": "field required"},
                {"body.tokens_in": "Input should be greater than or equal to 0"}
            ]
        }
    """
    error_messages = unpack_validation_error(exc)
    logger.error(f"Validation error: {error_messages}")
    return JSONResponse(status_code=422, content=error_messages)


async def not_found_exception_handler(request: Request, exc: NotFoundException) -> JSONResponse:
    """Exception handler for NotFoundException.

    Args:
    ----
        request (Request): The incoming request that triggered the exception.
        exc (NotFoundException): The exception object that was raised.

    Returns:
    -------
        JSONResponse: A 404 Not Found status response that details the error message.

    """
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def invalid_state_exception_handler(request: Request, exc: InvalidStateError) -> JSONResponse:
    """Exception handler for InvalidStateError (400)."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def domain_validation_exception_handler(
    request: Request, exc: DomainValidationError
) -> JSONResponse:
    """Exception handler for DomainValidationError (400)."""
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def conflict_exception_handler(request: Request, exc: ConflictException) -> JSONResponse:
    """Exception handler for ConflictException (409)."""
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Exception handler for database constraint violations.

    The raw database message is logged, never returned.
    """
    logger.warning(f"Integrity error on {request.method} {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=409,
        content={"detail": "Resource conflicts with an existing one or references a missing one"},
    )


async def external_service_exception_handler(
    request: Request, exc: ExternalServiceError
) -> JSONResponse:
    """Exception handler for failures of external services (502)."""
    logger.error(f"External service error: {exc}")
    return JSONResponse(status_code=502, content={"detail": exc.message})


async def promptops_exception_handler(request: Request, exc: PromptOpsException) -> JSONResponse:
    """Fallback handler for the remaining PromptOpsException types (500)."""
    logger.error(f"Unhandled application error: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})
