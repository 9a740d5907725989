"""Models for the application."""

from promptops.models._base import Base
from promptops.models.api_key import APIKey
from promptops.models.audit_log import AuditLog
from promptops.models.billing import Billing
from promptops.models.chat_session import ChatSession
from promptops.models.experiment import Experiment
from promptops.models.membership import Membership
from promptops.models.organization import Organization
from promptops.models.pipeline import Pipeline
from promptops.models.project import Project
from promptops.models.prompt import Prompt
from promptops.models.prompt_version import PromptVersion
from promptops.models.provider_key import ProviderKey
from promptops.models.run import Run
from promptops.models.template import Template
from promptops.models.user import User
from promptops.models.webhook import Webhook

__all__ = [
    "Base",
    "APIKey",
    "AuditLog",
    "Billing",
    "ChatSession",
    "Experiment",
    "Membership",
    "Organization",
    "Pipeline",
    "Project",
    "Prompt",
    "PromptVersion",
    "ProviderKey",
    "Run",
    "Template",
    "User",
    "Webhook",
]
