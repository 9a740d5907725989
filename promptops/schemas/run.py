"""Run, analytics and export schemas."""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from promptops.core.shared_models import ExportFormat


class RunCreate(BaseModel):
    """Run creation schema."""

    project_id: UUID
    prompt_id: UUID
    version_id: UUID
    experiment_id: Optional[UUID] = None
    model: str = Field(..., min_length=1)
    input: Dict[str, Any] = Field(default_factory=dict)
    output: Dict[str, Any] = Field(default_factory=dict)
    tokens_in: int = Field(..., ge=0)
    tokens_out: int = Field(..., ge=0)
    cost_usd: float = Field(..., ge=0)
    latency_ms: int = Field(..., ge=0)
    success: bool
    flags: Dict[str, Any] = Field(default_factory=dict)


class Run(BaseModel):
    """Run schema."""

    model_config = {"from_attributes": True}

    id: UUID
    project_id: UUID
    prompt_id: UUID
    version_id: UUID
    experiment_id: Optional[UUID] = None
    model: str
    input: Dict[str, Any]
    output: Dict[str, Any]
    tokens_in: int
    tokens_out: int
    cost_usd: float
    latency_ms: int
    success: bool
    flags: Dict[str, Any]
    created_at: datetime


class AnalyticsQuery(BaseModel):
    """Filters shared by analytics and export."""

    organization_id: UUID
    project_id: Optional[UUID] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    model: Optional[str] = None


class CostByDay(BaseModel):
    """Total cost of the runs created on one UTC day."""

    date: str
    cost: float


class Analytics(BaseModel):
    """Aggregated run metrics."""

    total_runs: int
    total_tokens: int
    total_cost: float
    avg_latency: int
    success_rate: float
    runs_by_model: Dict[str, int]
    cost_by_day: list[CostByDay]


class RunExportRequest(BaseModel):
    """Export request."""

    query: AnalyticsQuery
    format: ExportFormat = ExportFormat.CSV
