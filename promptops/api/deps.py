"""Dependencies that are used in the API endpoints."""

import uuid

from fastapi import Request

from promptops.api.context import RequestContext
from promptops.core.logging import logger
from promptops.db.session import get_db

__all__ = ["get_context", "get_db"]


async def get_context(request: Request) -> RequestContext:
    """Build the request context with a logger bound to the request id.

    Args:
    ----
        request (Request): The incoming request; the request id is set by middleware.

    Returns:
    -------
        RequestContext: The context passed on to the services.

    """
    request_id = getattr(request.state, "request_id", None) or str(uuid.uuid4())
    return RequestContext(
        request_id=request_id,
        logger=logger.with_context(request_id=request_id, endpoint=request.url.path),
    )
