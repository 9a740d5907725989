"""Encryption of secrets stored at rest, such as AI provider API keys."""

from cryptography.fernet import Fernet, InvalidToken

from promptops.core.config import settings
from promptops.core.exceptions import PromptOpsException


def get_encryption_fernet() -> Fernet:
    """Get Fernet instance for encryption/decryption.

    Returns:
    -------
        Fernet: The Fernet instance.
    """
    return Fernet(settings.ENCRYPTION_KEY.encode())


def encrypt(secret: str) -> str:
    """Encrypt a secret string.

    Args:
    ----
        secret (str): The plaintext secret.

    Returns:
    -------
        str: The Fernet token as text.
    """
    return get_encryption_fernet().encrypt(secret.encode()).decode()


def decrypt(token: str) -> str:
    """Decrypt a secret previously produced by :func:`encrypt`.

    Args:
    ----
        token (str): The encrypted data.

    Returns:
    -------
        str: The plaintext secret.

    Raises:
    ------
        PromptOpsException: If the token was not produced with the configured key.
    """
    try:
        return get_encryption_fernet().decrypt(token.encode()).decode()
    except InvalidToken as e:
        raise PromptOpsException("Stored secret could not be decrypted") from e
