"""Simulated AI model provider.

No provider is actually called. Completions, key checks and variant runs return
deterministic text with random token counts and latencies, which is enough for the
analytics, experiment and chat flows built on top of them.
"""

import json
import random
from dataclasses import dataclass
from typing import Any, Optional

from promptops.core.shared_models import ProviderType

SUPPORTED_PROVIDERS = frozenset(provider.value for provider in ProviderType)


@dataclass
class VariantResponse:
    """Simulated response of one experiment variant."""

    variant: str
    content: str
    tokens: int
    latency: int
    variant_config: Any


def chat_reply(content: str, model: str) -> str:
    """Return the placeholder assistant reply to a chat message."""
    return (
        f'I received your message: "{content}". This is a placeholder response using {model}.'
    )


def run_variant(variant: str, variant_config: Any, input_data: Any) -> VariantResponse:
    """Simulate running one experiment variant against an input."""
    return VariantResponse(
        variant=variant,
        content=f"Response from {variant} with input: {json.dumps(input_data)}",
        tokens=random.randint(50, 149),
        latency=random.randint(300, 499),
        variant_config=variant_config,
    )


def check_key(provider: str, api_key: str) -> tuple[bool, Optional[str]]:
    """Check a provider key.

    Returns:
        A ``(valid, error)`` pair; ``error`` is None for valid keys.
    """
    if provider not in SUPPORTED_PROVIDERS:
        return False, f"Unsupported provider: {provider}"
    if not api_key or not api_key.strip():
        return False, "API key must not be empty"
    return True, None
