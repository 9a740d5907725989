# flake8: noqa: F401
"""Schemas for the application."""

from .api_key import APIKey, APIKeyCreate, APIKeyWithToken
from .audit_log import AuditLog, AuditLogCreate
from .billing import (
    Billing,
    CheckoutSession,
    CheckoutSessionCreate,
    PlanUpdate,
    PortalSession,
    PortalSessionCreate,
    SessionVerification,
    SessionVerificationRequest,
    UsageQuota,
)
from .chat import ChatMessageCreate, ChatSession, ChatSessionCreate, ChatSessionUpdate
from .experiment import (
    Experiment,
    ExperimentComparison,
    ExperimentComparisonRequest,
    ExperimentCreate,
    VariantResult,
)
from .organization import (
    Membership,
    MembershipCreate,
    MembershipUpdate,
    Organization,
    OrganizationCreate,
    OrganizationUpdate,
)
from .pipeline import (
    GraphValidation,
    NodeResult,
    Pipeline,
    PipelineCreate,
    PipelineExecuteRequest,
    PipelineExecutionResult,
    PipelineUpdate,
)
from .project import Project, ProjectCreate, ProjectUpdate
from .prompt import (
    Prompt,
    PromptCreate,
    PromptUpdate,
    PromptVersion,
    PromptVersionComparison,
    PromptVersionCreate,
    PromptVersionPromote,
)
from .provider_key import ProviderKey, ProviderKeyCreate, ProviderKeyTest, ProviderKeyTestResult
from .run import Analytics, AnalyticsQuery, CostByDay, Run, RunCreate, RunExportRequest
from .template import Template, TemplateCreate, TemplateInstall, TemplateInstallResult
from .user import User, UserCreate, UserUpdate
from .webhook import Webhook, WebhookCreate
