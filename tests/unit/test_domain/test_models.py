"""Tests for domain models and exceptions."""

import pytest
from pydantic import SecretStr, TypeAdapter, ValidationError

from secret_gateway.domain.exceptions import (
    ConfigurationError,
    RetryInterruptedError,
    SecretNotFoundError,
    TransientSecretStoreError,
)
from secret_gateway.domain.models import (
    CredentialSpec,
    ErrorCode,
    ErrorOutcome,
    LocalCredentials,
    OutcomeRecord,
    RetrievalRequest,
    RetrievalState,
    SecretResult,
)


class TestRetrievalRequest:
    """Test RetrievalRequest model."""

    def test_defaults(self):
        """Test default retry settings."""
        request = RetrievalRequest(secret_id="db")

        assert request.region == "us-east-1"
        assert request.max_attempts == 3
        assert request.retry_delay_seconds == 1.0

    def test_negative_values_rejected(self):
        """Test negative retry settings are invalid."""
        with pytest.raises(ValidationError):
            RetrievalRequest(secret_id="db", retry_delay_ms=-1)

    def test_immutable(self):
        """Test requests cannot be modified."""
        request = RetrievalRequest(secret_id="db")
        with pytest.raises(ValidationError):
            request.secret_id = "other"


class TestCredentialSpec:
    """Test the credential variant union."""

    def test_discriminated_by_kind(self):
        """Test the variant is chosen from its kind."""
        spec = TypeAdapter(CredentialSpec).validate_python(
            {"kind": "local", "access_key": "AKIA1", "secret_key": "s"}
        )

        assert isinstance(spec, LocalCredentials)
        assert spec.secret_key.get_secret_value() == "s"

    def test_secret_not_in_repr(self):
        """Test secret material is hidden in repr."""
        spec = LocalCredentials(access_key="AKIA1", secret_key=SecretStr("hidden"))
        assert "hidden" not in repr(spec)


class TestOutcomeRecord:
    """Test OutcomeRecord model."""

    def test_success(self):
        """Test a success outcome."""
        outcome = OutcomeRecord.success(SecretResult(value="v"), attempts=2)

        assert outcome.succeeded
        assert outcome.status_code == 200
        assert outcome.state == RetrievalState.SUCCEEDED

    def test_failure(self):
        """Test a failure outcome carries its status."""
        outcome = OutcomeRecord.failure(
            RetrievalState.PERMANENT_FAILURE, ErrorCode.INVALID_REQUEST, "bad", 400
        )

        assert not outcome.succeeded
        assert outcome.status_code == 400

    def test_exactly_one_outcome(self):
        """Test result and error are mutually exclusive."""
        with pytest.raises(ValidationError):
            OutcomeRecord(state=RetrievalState.SUCCEEDED)

        with pytest.raises(ValidationError):
            OutcomeRecord(
                state=RetrievalState.SUCCEEDED,
                result=SecretResult(value="v"),
                error=ErrorOutcome(kind=ErrorCode.UNEXPECTED_ERROR, message="x"),
            )


class TestExceptions:
    """Test the exception hierarchy."""

    def test_not_found(self):
        """Test not found errors are permanent with status 404."""
        error = SecretNotFoundError("db", remote_code="ResourceNotFoundException")

        assert error.status_code == 404
        assert not error.retryable
        assert error.details == {
            "secret_id": "db",
            "remote_code": "ResourceNotFoundException",
        }

    def test_transient(self):
        """Test transient errors are retryable without a status."""
        error = TransientSecretStoreError("busy")

        assert error.retryable
        assert error.status_code is None
        assert error.error_code == ErrorCode.UNCLASSIFIED_ERROR

    def test_configuration_error(self):
        """Test configuration errors record the field."""
        error = ConfigurationError("Secret name not specified", field="secretName")

        assert error.field == "secretName"
        assert error.error_code == ErrorCode.CONFIGURATION_ERROR

    def test_retry_interrupted(self):
        """Test interrupted retries record the attempt count."""
        error = RetryInterruptedError(2)

        assert error.attempts == 2
        assert str(error) == "Retry interrupted after 2 attempts"
