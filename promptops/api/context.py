"""Request context passed from the API layer into the services."""

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict

from promptops.core.logging import ContextualLogger


class RequestContext(BaseModel):
    """Per-request metadata and the logger carrying it.

    There is no end-user authentication, so the context only holds what the
    services need for tracing: the request id and a logger whose dimensions already
    include it.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    request_id: str
    logger: ContextualLogger

    def __str__(self) -> str:
        """String representation for logging."""
        return f"RequestContext(request_id={self.request_id[:8]}...)"

    def to_serializable_dict(self) -> Dict[str, Any]:
        """Convert to a serializable dictionary."""
        return {"request_id": self.request_id}
