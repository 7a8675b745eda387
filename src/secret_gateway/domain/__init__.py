"""Domain layer for the secret gateway adapter.

This module contains the request, credential and outcome models together with
the exception hierarchy shared by every component.
"""

from .exceptions import (
    ConfigurationError,
    DecryptionError,
    InvalidSecretRequestError,
    RetrievalCancelledError,
    RetryInterruptedError,
    SecretDecryptionError,
    SecretGatewayError,
    SecretNotFoundError,
    SecretStoreError,
    TransientSecretStoreError,
)
from .models import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_REGION,
    DEFAULT_RETRY_DELAY_MS,
    CredentialSpec,
    CredentialType,
    DefaultChainCredentials,
    ErrorCode,
    ErrorOutcome,
    FileCredentials,
    IamRoleCredentials,
    InlineCredentials,
    LocalCredentials,
    OutcomeRecord,
    ProfileCredentials,
    RetrievalRequest,
    RetrievalState,
    SecretResult,
    ValueType,
)

__all__ = [
    # Models
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_REGION",
    "DEFAULT_RETRY_DELAY_MS",
    "CredentialSpec",
    "CredentialType",
    "DefaultChainCredentials",
    "ErrorCode",
    "ErrorOutcome",
    "FileCredentials",
    "IamRoleCredentials",
    "InlineCredentials",
    "LocalCredentials",
    "OutcomeRecord",
    "ProfileCredentials",
    "RetrievalRequest",
    "RetrievalState",
    "SecretResult",
    "ValueType",
    # Exceptions
    "ConfigurationError",
    "DecryptionError",
    "InvalidSecretRequestError",
    "RetrievalCancelledError",
    "RetryInterruptedError",
    "SecretDecryptionError",
    "SecretGatewayError",
    "SecretNotFoundError",
    "SecretStoreError",
    "TransientSecretStoreError",
]
