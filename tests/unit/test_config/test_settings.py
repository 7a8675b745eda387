"""Unit tests for configuration management."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from secret_gateway.config import settings as gateway_settings
from secret_gateway.config.settings import (
    CipherSettings,
    CredentialSettings,
    Environment,
    GatewaySettings,
    ObservabilitySettings,
    RetrievalSettings,
    configure_logging,
    get_settings,
)
from secret_gateway.observability.logging import LogFormat, LogLevel


class TestRetrievalSettings:
    """Test retrieval defaults."""

    def test_default_values(self):
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = RetrievalSettings()

        assert settings.default_region == "us-east-1"
        assert settings.default_max_retries == 3
        assert settings.default_retry_delay_ms == 1000
        assert settings.attribute_prefix == "aws.secretsmanager."

    def test_environment_override(self):
        """Test values are read from prefixed environment variables."""
        env = {
            "SECRET_GATEWAY_DEFAULT_REGION": "eu-west-2",
            "SECRET_GATEWAY_DEFAULT_MAX_RETRIES": "5",
            "SECRET_GATEWAY_ATTRIBUTE_PREFIX": "vault",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = RetrievalSettings()

        assert settings.default_region == "eu-west-2"
        assert settings.default_max_retries == 5
        assert settings.attribute_prefix == "vault."

    def test_negative_retries_rejected(self):
        """Test negative defaults are rejected."""
        with pytest.raises(ValidationError):
            RetrievalSettings(default_max_retries=-1)


class TestCredentialSettings:
    """Test process-wide credential inputs."""

    def test_no_inline_credentials_by_default(self):
        """Test no explicit pair is configured by default."""
        with patch.dict(os.environ, {}, clear=True):
            settings = CredentialSettings()

        assert settings.inline_credentials() is None
        assert settings.default_profile == "default"

    def test_half_pair_ignored(self):
        """Test an access key without its secret is ignored."""
        settings = CredentialSettings(access_key_id="AKIAEXAMPLE")
        assert settings.inline_credentials() is None

    def test_inline_credentials_from_environment(self):
        """Test the explicit pair is read from the environment."""
        env = {
            "SECRET_GATEWAY_AWS_ACCESS_KEY_ID": "AKIAEXAMPLE",
            "SECRET_GATEWAY_AWS_SECRET_ACCESS_KEY": "secret",
        }
        with patch.dict(os.environ, env, clear=True):
            inline = CredentialSettings().inline_credentials()

        assert inline.access_key == "AKIAEXAMPLE"
        assert inline.secret_key.get_secret_value() == "secret"
        assert str(inline.secret_key) == "**********"


class TestCipherSettings:
    """Test cipher key material settings."""

    def test_passphrase_hidden(self):
        """Test the passphrase is not exposed in repr."""
        settings = CipherSettings(passphrase="very-secret")

        assert settings.passphrase.get_secret_value() == "very-secret"
        assert "very-secret" not in repr(settings)


class TestGetSettings:
    """Test environment based settings selection."""

    @pytest.mark.parametrize(
        "environment,expected",
        [
            ("development", "DevelopmentSettings"),
            ("testing", "TestingSettings"),
            ("production", "ProductionSettings"),
        ],
    )
    def test_selection(self, environment, expected):
        """Test the settings class follows ENVIRONMENT."""
        with patch.dict(os.environ, {"ENVIRONMENT": environment}, clear=True):
            settings = get_settings()

        assert type(settings).__name__ == expected

    def test_testing_settings(self):
        """Test testing settings disable retry delays."""
        with patch.dict(os.environ, {"ENVIRONMENT": "testing"}, clear=True):
            settings = gateway_settings.TestingSettings()

        assert settings.environment == Environment.TESTING
        assert settings.retrieval.default_retry_delay_ms == 0
        assert settings.observability.level == LogLevel.WARNING
        assert settings.observability.format == LogFormat.STRUCTURED

    def test_production_settings(self):
        """Test production settings use JSON logs."""
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}, clear=True):
            settings = get_settings()

        assert settings.is_production
        assert settings.observability.format == LogFormat.JSON

    def test_development_settings(self):
        """Test development settings use console logs."""
        with patch.dict(os.environ, {"ENVIRONMENT": "development"}, clear=True):
            settings = get_settings()

        assert not settings.is_production
        assert settings.observability.level == LogLevel.DEBUG
        assert settings.observability.format == LogFormat.CONSOLE

    def test_default_settings(self):
        """Test the base settings aggregate all sections."""
        with patch.dict(os.environ, {}, clear=True):
            settings = GatewaySettings()

        assert settings.environment == Environment.DEVELOPMENT
        assert settings.cipher.passphrase is None
        assert settings.credentials.inline_credentials() is None


class TestConfigureLogging:
    """Test applying observability settings."""

    def test_applies_observability_settings(self):
        """Test level, format and file are passed to the logging setup."""
        settings = GatewaySettings(
            observability=ObservabilitySettings(
                level=LogLevel.ERROR, format=LogFormat.CONSOLE, file="gateway.log"
            )
        )

        with patch.object(gateway_settings, "setup_logging") as setup:
            configure_logging(settings)

        setup.assert_called_once_with(
            level=LogLevel.ERROR, format_type=LogFormat.CONSOLE, log_file="gateway.log"
        )

    def test_defaults_to_environment_settings(self):
        """Test settings are loaded from the environment when omitted."""
        with patch.dict(os.environ, {"ENVIRONMENT": "testing"}, clear=True):
            with patch.object(gateway_settings, "setup_logging") as setup:
                configure_logging()

        assert setup.call_args.kwargs["format_type"] == LogFormat.STRUCTURED
