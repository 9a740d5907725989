"""CRUD operations for the application."""

from .crud_api_key import api_key
from .crud_audit_log import audit_log
from .crud_billing import billing
from .crud_chat_session import chat_session
from .crud_experiment import experiment
from .crud_organization import membership, organization
from .crud_pipeline import pipeline
from .crud_project import project
from .crud_prompt import prompt, prompt_version
from .crud_provider_key import provider_key
from .crud_run import run
from .crud_template import template
from .crud_user import user
from .crud_webhook import webhook

__all__ = [
    "api_key",
    "audit_log",
    "billing",
    "chat_session",
    "experiment",
    "membership",
    "organization",
    "pipeline",
    "project",
    "prompt",
    "prompt_version",
    "provider_key",
    "run",
    "template",
    "user",
    "webhook",
]
