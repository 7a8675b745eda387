"""Classification of secret store failures into permanent and transient errors."""

from botocore.exceptions import BotoCoreError, ClientError

from ..domain.exceptions import (
    InvalidSecretRequestError,
    SecretDecryptionError,
    SecretNotFoundError,
    SecretStoreError,
    TransientSecretStoreError,
)
from ..domain.models import ErrorCode

NOT_FOUND_CODES = frozenset({"ResourceNotFoundException"})
INVALID_REQUEST_CODES = frozenset(
    {"InvalidRequestException", "InvalidParameterException"}
)
DECRYPTION_FAILURE_CODES = frozenset({"DecryptionFailure", "DecryptionFailureException"})
INTERNAL_SERVICE_CODES = frozenset(
    {"InternalServiceError", "InternalServiceErrorException"}
)


def _client_error_details(error: ClientError) -> tuple[str, str]:
    details = error.response.get("Error", {}) if error.response else {}
    code = details.get("Code") or ""
    message = details.get("Message") or str(error)
    return code, message


def classify_error(error: Exception, secret_id: str) -> SecretStoreError:
    """Map any failure of a remote call onto the secret store error taxonomy."""
    if isinstance(error, SecretStoreError):
        return error

    if isinstance(error, ClientError):
        code, message = _client_error_details(error)
        if code in NOT_FOUND_CODES:
            return SecretNotFoundError(secret_id, remote_code=code)
        if code in INVALID_REQUEST_CODES:
            return InvalidSecretRequestError(message, secret_id, remote_code=code)
        if code in DECRYPTION_FAILURE_CODES:
            return SecretDecryptionError(message, secret_id, remote_code=code)
        if code in INTERNAL_SERVICE_CODES:
            return TransientSecretStoreError(
                message,
                ErrorCode.INTERNAL_SERVICE_ERROR,
                secret_id=secret_id,
                remote_code=code,
            )
        return TransientSecretStoreError(
            message,
            ErrorCode.UNCLASSIFIED_ERROR,
            secret_id=secret_id,
            remote_code=code or None,
        )

    if isinstance(error, BotoCoreError):
        return TransientSecretStoreError(
            str(error),
            ErrorCode.UNCLASSIFIED_ERROR,
            secret_id=secret_id,
            remote_code=type(error).__name__,
        )

    return TransientSecretStoreError(
        str(error) or type(error).__name__,
        ErrorCode.UNCLASSIFIED_ERROR,
        secret_id=secret_id,
    )


def is_transient(error: BaseException) -> bool:
    """Retry predicate: only classified transient store errors are retried."""
    return isinstance(error, SecretStoreError) and error.retryable
