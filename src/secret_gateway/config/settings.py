"""
Configuration management for the secret gateway adapter.

Settings are read from the environment (and an optional ``.env`` file) and
supply process-wide defaults. Per-filter values still come from the mapping
passed to ``SecretGatewayAdapter.attach``.
"""

import os
from enum import Enum

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.models import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_REGION,
    DEFAULT_RETRY_DELAY_MS,
    InlineCredentials,
)
from ..observability.logging import LogFormat, LogLevel, setup_logging


class Environment(str, Enum):
    """Deployment environments."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class RetrievalSettings(BaseSettings):
    """Defaults applied when a filter leaves a retrieval field blank."""

    model_config = SettingsConfigDict(
        env_prefix="SECRET_GATEWAY_", env_file=".env", extra="ignore"
    )

    default_region: str = DEFAULT_REGION
    default_max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    default_retry_delay_ms: int = Field(default=DEFAULT_RETRY_DELAY_MS, ge=0)
    attribute_prefix: str = "aws.secretsmanager."

    @field_validator("attribute_prefix")
    @classmethod
    def validate_attribute_prefix(cls, v: str) -> str:
        if v and not v.endswith("."):
            return f"{v}."
        return v


class CredentialSettings(BaseSettings):
    """Process-wide credential inputs."""

    model_config = SettingsConfigDict(
        env_prefix="SECRET_GATEWAY_AWS_", env_file=".env", extra="ignore"
    )

    # Explicit key pair, used by the local credential type when no inline
    # credential string is configured on the filter
    access_key_id: str | None = None
    secret_access_key: SecretStr | None = None

    default_profile: str = "default"

    def inline_credentials(self) -> InlineCredentials | None:
        """Return the explicit key pair if both halves are set."""
        if self.access_key_id and self.secret_access_key:
            return InlineCredentials(
                access_key=self.access_key_id,
                secret_key=self.secret_access_key,
            )
        return None


class CipherSettings(BaseSettings):
    """Key material for encrypted configuration values."""

    model_config = SettingsConfigDict(
        env_prefix="SECRET_GATEWAY_CIPHER_", env_file=".env", extra="ignore"
    )

    passphrase: SecretStr | None = None
    salt: str = "secret_gateway_config"


class ObservabilitySettings(BaseSettings):
    """Observability configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SECRET_GATEWAY_LOG_", env_file=".env", extra="ignore"
    )

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str | None = None


class GatewaySettings(BaseSettings):
    """Main adapter settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    environment: Environment = Environment.DEVELOPMENT

    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    credentials: CredentialSettings = Field(default_factory=CredentialSettings)
    cipher: CipherSettings = Field(default_factory=CipherSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION


class DevelopmentSettings(GatewaySettings):
    """Development environment settings."""

    environment: Environment = Environment.DEVELOPMENT

    observability: ObservabilitySettings = Field(
        default_factory=lambda: ObservabilitySettings(
            level=LogLevel.DEBUG, format=LogFormat.CONSOLE
        )
    )


class TestingSettings(GatewaySettings):
    """Testing environment settings."""

    environment: Environment = Environment.TESTING

    retrieval: RetrievalSettings = Field(
        default_factory=lambda: RetrievalSettings(default_retry_delay_ms=0)
    )
    observability: ObservabilitySettings = Field(
        default_factory=lambda: ObservabilitySettings(
            level=LogLevel.WARNING, format=LogFormat.STRUCTURED
        )
    )


class ProductionSettings(GatewaySettings):
    """Production environment settings."""

    environment: Environment = Environment.PRODUCTION

    observability: ObservabilitySettings = Field(
        default_factory=lambda: ObservabilitySettings(
            level=LogLevel.INFO, format=LogFormat.JSON
        )
    )


def get_settings() -> GatewaySettings:
    """Get adapter settings based on environment."""
    environment = os.getenv("ENVIRONMENT", "development").lower()

    if environment == "development":
        return DevelopmentSettings()
    elif environment == "production":
        return ProductionSettings()
    elif environment == "testing":
        return TestingSettings()
    else:
        return GatewaySettings()


def configure_logging(settings: GatewaySettings | None = None) -> None:
    """Apply the observability settings to structlog and stdlib logging."""
    observability = (settings or get_settings()).observability
    setup_logging(
        level=observability.level,
        format_type=observability.format,
        log_file=observability.file,
    )
