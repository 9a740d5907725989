"""Provider key model."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from promptops.models._base import OrganizationBase


class ProviderKey(OrganizationBase):
    """Credentials of an AI model provider, stored Fernet-encrypted."""

    __tablename__ = "provider_key"

    provider: Mapped[str] = mapped_column(String(20), nullable=False)
    label: Mapped[str] = mapped_column(String, nullable=False)
    encrypted_api_key: Mapped[str] = mapped_column(Text, nullable=False)
