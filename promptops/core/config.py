"""Configuration settings for the PromptOps backend.

Wraps environment variables and provides defaults.
"""

from typing import Optional

from pydantic import PostgresDsn, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pydantic settings class.

    Attributes:
    ----------
        PROJECT_NAME (str): The name of the project.
        LOCAL_DEVELOPMENT (bool): Whether the application is running locally.
        ENVIRONMENT (str): The deployment environment (local, dev, test, prod).
        DEBUG (bool): Whether debug mode is enabled.
        LOG_LEVEL (str): The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        ENCRYPTION_KEY (str): Fernet key used to encrypt provider API keys.
        POSTGRES_HOST (str): The PostgreSQL server hostname.
        POSTGRES_PORT (int): The PostgreSQL server port.
        POSTGRES_DB (str): The PostgreSQL database name.
        POSTGRES_USER (str): The PostgreSQL username.
        POSTGRES_PASSWORD (str): The PostgreSQL password.
        SQLALCHEMY_ASYNC_DATABASE_URI (Optional[str]): The SQLAlchemy async database URI.
        RUN_ALEMBIC_MIGRATIONS (bool): Whether to run the alembic migrations on startup.
        CREATE_TABLES_ON_STARTUP (bool): Whether to create missing tables from the models.
        STRIPE_ENABLED (bool): Whether real Stripe calls are made.
        STRIPE_SECRET_KEY (Optional[str]): The Stripe secret key.
        STRIPE_WEBHOOK_SECRET (Optional[str]): The Stripe webhook signing secret.
        BILLING_PERIOD_DAYS (int): Days until a paid plan renews.
        CHAT_STREAM_DELAY_SECONDS (float): Delay between streamed chat chunks.
        ADDITIONAL_CORS_ORIGINS (Optional[str]): Additional CORS origins separated by commas.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    PROJECT_NAME: str = "PromptOps"
    LOCAL_DEVELOPMENT: bool = False
    ENVIRONMENT: str = "local"

    # Debug configuration
    DEBUG: bool = False

    # Logging configuration
    LOG_LEVEL: str = "INFO"

    ENCRYPTION_KEY: str

    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "promptops"
    POSTGRES_USER: str = "promptops"
    POSTGRES_PASSWORD: str = ""
    SQLALCHEMY_ASYNC_DATABASE_URI: Optional[str] = None

    RUN_ALEMBIC_MIGRATIONS: bool = False
    CREATE_TABLES_ON_STARTUP: bool = False

    # Stripe configuration
    STRIPE_ENABLED: bool = False
    STRIPE_SECRET_KEY: Optional[str] = None
    STRIPE_WEBHOOK_SECRET: Optional[str] = None
    STRIPE_PRO_PRICE_ID: Optional[str] = None
    STRIPE_ENTERPRISE_PRICE_ID: Optional[str] = None

    BILLING_PERIOD_DAYS: int = 30
    CHAT_STREAM_DELAY_SECONDS: float = 0.05

    ADDITIONAL_CORS_ORIGINS: Optional[str] = None  # Separated by commas

    @field_validator("SQLALCHEMY_ASYNC_DATABASE_URI", mode="before")
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> str:
        """Build the SQLAlchemy database URI.

        An explicitly configured URI is used as is, which lets tests point the
        application at an in-memory SQLite database.

        Args:
        ----
            v (Optional[str]): The value of the SQLALCHEMY_ASYNC_DATABASE_URI setting.
            info (ValidationInfo): The validation context containing all field values.

        Returns:
        -------
            str: The SQLAlchemy URI.

        """
        if isinstance(v, str) and v:
            return v
        return str(
            PostgresDsn.build(
                scheme="postgresql+asyncpg",
                username=info.data.get("POSTGRES_USER"),
                password=info.data.get("POSTGRES_PASSWORD"),
                host=info.data.get("POSTGRES_HOST"),
                port=info.data.get("POSTGRES_PORT"),
                path=f"{info.data.get('POSTGRES_DB') or ''}",
            )
        )

    @property
    def cors_origins(self) -> list[str]:
        """Additional CORS origins as a list."""
        if not self.ADDITIONAL_CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.ADDITIONAL_CORS_ORIGINS.split(",") if origin]


settings = Settings()
