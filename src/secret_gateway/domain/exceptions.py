"""Exception hierarchy for the secret gateway adapter."""

import asyncio
from typing import Any

from .models import ErrorCode, OutcomeRecord


class SecretGatewayError(Exception):
    """Base exception for secret gateway errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(SecretGatewayError):
    """Required configuration is missing or unusable."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message,
            ErrorCode.CONFIGURATION_ERROR,
            {"field": field} if field else None,
        )
        self.field = field


class SecretStoreError(SecretGatewayError):
    """Error reported by the remote secret store."""

    status_code: int | None = 500
    retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        secret_id: str | None = None,
        remote_code: str | None = None,
    ):
        super().__init__(
            message,
            error_code,
            {"secret_id": secret_id, "remote_code": remote_code},
        )
        self.secret_id = secret_id
        self.remote_code = remote_code


class SecretNotFoundError(SecretStoreError):
    """The requested secret does not exist."""

    status_code = 404

    def __init__(self, secret_id: str, remote_code: str | None = None):
        super().__init__(
            f"Secret not found: {secret_id}",
            ErrorCode.SECRET_NOT_FOUND,
            secret_id=secret_id,
            remote_code=remote_code,
        )


class InvalidSecretRequestError(SecretStoreError):
    """The store rejected the request or one of its parameters."""

    status_code = 400

    def __init__(
        self, reason: str, secret_id: str | None = None, remote_code: str | None = None
    ):
        super().__init__(
            f"Invalid request: {reason}",
            ErrorCode.INVALID_REQUEST,
            secret_id=secret_id,
            remote_code=remote_code,
        )
        self.reason = reason


class SecretDecryptionError(SecretStoreError):
    """The store could not decrypt the secret with its KMS key."""

    status_code = 500

    def __init__(
        self, reason: str, secret_id: str | None = None, remote_code: str | None = None
    ):
        super().__init__(
            f"Decryption failure: {reason}",
            ErrorCode.DECRYPTION_FAILURE,
            secret_id=secret_id,
            remote_code=remote_code,
        )
        self.reason = reason


class TransientSecretStoreError(SecretStoreError):
    """A failure expected to clear on retry."""

    status_code = None
    retryable = True

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNCLASSIFIED_ERROR,
        secret_id: str | None = None,
        remote_code: str | None = None,
    ):
        super().__init__(
            message, error_code, secret_id=secret_id, remote_code=remote_code
        )


class RetryInterruptedError(SecretGatewayError):
    """The wait between two attempts was cancelled."""

    def __init__(self, attempts: int):
        super().__init__(
            f"Retry interrupted after {attempts} attempts",
            ErrorCode.RETRY_INTERRUPTED,
            {"attempts": attempts},
        )
        self.attempts = attempts


class DecryptionError(SecretGatewayError):
    """An encrypted configuration value could not be decrypted."""

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Failed to decrypt {field}: {reason}",
            ErrorCode.CIPHER_ERROR,
            {"field": field},
        )
        self.field = field


class RetrievalCancelledError(asyncio.CancelledError):
    """The task running an async retrieval was cancelled.

    Carries the interrupted outcome so it can be reported before the
    cancellation keeps propagating.
    """

    def __init__(self, outcome: OutcomeRecord):
        super().__init__(outcome.error.message if outcome.error else None)
        self.outcome = outcome
