"""Configuration for the secret gateway adapter."""

from .settings import (
    CipherSettings,
    CredentialSettings,
    Environment,
    GatewaySettings,
    ObservabilitySettings,
    RetrievalSettings,
    configure_logging,
    get_settings,
)

__all__ = [
    "CipherSettings",
    "CredentialSettings",
    "Environment",
    "GatewaySettings",
    "ObservabilitySettings",
    "RetrievalSettings",
    "configure_logging",
    "get_settings",
]
