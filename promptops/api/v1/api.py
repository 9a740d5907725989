"""API routes for the FastAPI application."""

from promptops.api.router import TrailingSlashRouter
from promptops.api.v1.endpoints import (
    api_keys,
    audit,
    billing,
    chat,
    experiments,
    health,
    organizations,
    pipelines,
    projects,
    prompts,
    provider_keys,
    runs,
    templates,
    users,
    webhooks,
)

# Use our custom router that handles trailing slashes
api_router = TrailingSlashRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(organizations.router, prefix="/organizations", tags=["organizations"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(prompts.router, prefix="/prompts", tags=["prompts"])
api_router.include_router(chat.router, prefix="/chat", tags=["chat"])
api_router.include_router(experiments.router, prefix="/experiments", tags=["experiments"])
api_router.include_router(runs.router, prefix="/runs", tags=["runs"])
api_router.include_router(pipelines.router, prefix="/pipelines", tags=["pipelines"])
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])
api_router.include_router(provider_keys.router, prefix="/provider-keys", tags=["provider-keys"])
api_router.include_router(templates.router, prefix="/templates", tags=["templates"])
api_router.include_router(audit.router, prefix="/audit", tags=["audit"])
api_router.include_router(api_keys.router, prefix="/api-keys", tags=["api-keys"])
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
