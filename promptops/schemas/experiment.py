"""Experiment schemas."""

from datetime import datetime
from typing import Any, Dict
from uuid import UUID

from pydantic import BaseModel, Field

from promptops.core.shared_models import ExperimentStatus


class ExperimentCreate(BaseModel):
    """Experiment creation schema."""

    prompt_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    variants: Dict[str, Any] = Field(default_factory=dict)


class Experiment(BaseModel):
    """Experiment schema."""

    model_config = {"from_attributes": True}

    id: UUID
    prompt_id: UUID
    name: str
    status: ExperimentStatus
    variants: Dict[str, Any]
    created_at: datetime


class ExperimentComparisonRequest(BaseModel):
    """Input to run against the first two variants of an experiment."""

    input: Dict[str, Any] = Field(default_factory=dict)


class VariantResult(BaseModel):
    """Simulated response of one experiment variant."""

    variant: str
    content: str
    tokens: int
    latency: int
    variant_config: Any = None


class ExperimentComparison(BaseModel):
    """Results of running the same input through two variants."""

    variant_a: VariantResult
    variant_b: VariantResult
