"""Pipeline schemas."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from promptops.core.shared_models import PipelineStatus


class PipelineCreate(BaseModel):
    """Pipeline creation schema."""

    project_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    graph: Dict[str, Any] = Field(default_factory=lambda: {"nodes": [], "edges": []})
    endpoint_slug: Optional[str] = Field(None, min_length=1, max_length=200)


class PipelineUpdate(BaseModel):
    """Pipeline update schema."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    graph: Optional[Dict[str, Any]] = None
    status: Optional[PipelineStatus] = None
    endpoint_slug: Optional[str] = Field(None, min_length=1, max_length=200)


class Pipeline(BaseModel):
    """Pipeline schema."""

    model_config = {"from_attributes": True}

    id: UUID
    project_id: UUID
    name: str
    graph: Dict[str, Any]
    status: PipelineStatus
    endpoint_slug: Optional[str] = None
    created_at: datetime
    modified_at: datetime


class GraphValidation(BaseModel):
    """Verdict of the pipeline graph validator."""

    valid: bool
    errors: list[str]


class PipelineExecuteRequest(BaseModel):
    """Caller supplied input of a pipeline execution."""

    input: Dict[str, Any] = Field(default_factory=dict)


class NodeResult(BaseModel):
    """Result of one simulated node."""

    node_id: str
    output: Dict[str, Any]
    duration: int


class PipelineExecutionResult(BaseModel):
    """Outcome of a pipeline execution. Failures are reported, not raised."""

    success: bool
    output: Dict[str, Any]
    execution_time: int
    node_results: list[NodeResult] = Field(default_factory=list)
