"""Generation of identifiers, tokens and slugs.

All randomness and clock reads used for identifiers go through this module so tests
can patch a single place.
"""

import hashlib
import re
import secrets
import uuid
from typing import Optional

from promptops.core.datetime_utils import epoch_millis

API_KEY_PREFIX = "po_"
_SLUG_INVALID_CHARS = re.compile(r"[^a-z0-9]")


def new_id() -> uuid.UUID:
    """Return a new primary key."""
    return uuid.uuid4()


def generate_api_key() -> str:
    """Return a new plaintext organization API key."""
    return f"{API_KEY_PREFIX}{secrets.token_urlsafe(32)}"


def hash_token(token: str) -> str:
    """Return the sha256 hex digest under which a token is stored."""
    return hashlib.sha256(token.encode()).hexdigest()


def generate_webhook_secret() -> str:
    """Return a new webhook signing secret."""
    return f"whsec_{secrets.token_hex(24)}"


def generate_endpoint_slug(name: str, timestamp_ms: Optional[int] = None) -> str:
    """Build the public endpoint slug of a pipeline.

    Every character of the lowercased name outside ``[a-z0-9]`` becomes ``-`` and the
    millisecond timestamp is appended, e.g. ``"My Flow"`` -> ``"my-flow-1700000000000"``.
    """
    if timestamp_ms is None:
        timestamp_ms = epoch_millis()
    return f"{_SLUG_INVALID_CHARS.sub('-', name.lower())}-{timestamp_ms}"
