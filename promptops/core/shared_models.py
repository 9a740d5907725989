"""Shared enums for the backend."""

from enum import Enum


class MembershipRole(str, Enum):
    """Role of a user inside an organization."""

    OWNER = "owner"
    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class OrganizationPlan(str, Enum):
    """Subscription plan of an organization."""

    FREE = "free"
    PRO = "pro"
    ENTERPRISE = "enterprise"


class ProviderType(str, Enum):
    """AI model provider."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    LOCAL = "local"


class ExperimentStatus(str, Enum):
    """Experiment lifecycle status."""

    DRAFT = "draft"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PipelineStatus(str, Enum):
    """Pipeline lifecycle status."""

    DRAFT = "draft"
    PUBLISHED = "published"


class ExportFormat(str, Enum):
    """Supported run export formats."""

    CSV = "csv"
    JSON = "json"
