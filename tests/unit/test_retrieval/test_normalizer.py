"""Tests for result normalization and output attributes."""

import base64

from secret_gateway.domain.models import (
    ErrorCode,
    OutcomeRecord,
    RetrievalState,
    SecretResult,
    ValueType,
)
from secret_gateway.retrieval.normalizer import (
    normalize_secret,
    outcome_attributes,
    write_outcome,
)

PREFIX = "aws.secretsmanager."


class TestNormalizeSecret:
    """Test conversion of remote responses."""

    def test_text_secret(self, secret_response):
        """Test text secrets are kept as-is."""
        result = normalize_secret(secret_response(secret_string='{"user": "admin"}'))

        assert result.value == '{"user": "admin"}'
        assert result.value_type == ValueType.TEXT
        assert result.name == "test-db-password"
        assert result.version_stages == []

    def test_binary_secret(self, secret_response):
        """Test binary secrets are base64 encoded."""
        payload = bytes(range(256))
        result = normalize_secret(
            secret_response(secret_string=None, secret_binary=payload)
        )

        assert result.value_type == ValueType.BINARY
        assert base64.b64decode(result.value) == payload

    def test_text_wins_over_binary(self, secret_response):
        """Test a text payload takes precedence."""
        result = normalize_secret(
            secret_response(secret_string="text", secret_binary=b"bytes")
        )

        assert result.value == "text"
        assert result.value_type == ValueType.TEXT

    def test_empty_text_secret(self, secret_response):
        """Test an empty string is still a text secret."""
        result = normalize_secret(secret_response(secret_string=""))

        assert result.value == ""
        assert result.value_type == ValueType.TEXT

    def test_no_payload(self):
        """Test a response without payload yields no value."""
        result = normalize_secret({"Name": "empty"})

        assert result.value is None
        assert result.name == "empty"


class TestOutcomeAttributes:
    """Test flattening of outcomes into message attributes."""

    def test_success_attributes(self):
        """Test success writes value, status, metadata and joined stages."""
        outcome = OutcomeRecord.success(
            SecretResult(
                value="s3cr3t",
                arn="arn:aws:secretsmanager:us-east-1:1:secret:x",
                name="x",
                version_id="v1",
                version_stages=["AWSCURRENT", "AWSPENDING"],
            ),
            attempts=1,
        )

        attributes = outcome_attributes(outcome)

        assert attributes == {
            PREFIX + "value": "s3cr3t",
            PREFIX + "status.code": 200,
            PREFIX + "arn": "arn:aws:secretsmanager:us-east-1:1:secret:x",
            PREFIX + "name": "x",
            PREFIX + "version.id": "v1",
            PREFIX + "version.stages": "AWSCURRENT,AWSPENDING",
        }

    def test_binary_writes_value_type(self):
        """Test value.type is written only for binary secrets."""
        outcome = OutcomeRecord.success(
            SecretResult(value="AAE=", value_type=ValueType.BINARY), attempts=1
        )

        attributes = outcome_attributes(outcome)

        assert attributes[PREFIX + "value.type"] == "binary"

    def test_empty_stages_omitted(self):
        """Test version.stages is absent when there are no stages."""
        outcome = OutcomeRecord.success(SecretResult(value="x"), attempts=1)

        attributes = outcome_attributes(outcome)

        assert PREFIX + "version.stages" not in attributes
        assert PREFIX + "value.type" not in attributes

    def test_failure_with_status(self):
        """Test failures write the error and status code."""
        outcome = OutcomeRecord.failure(
            RetrievalState.PERMANENT_FAILURE,
            ErrorCode.SECRET_NOT_FOUND,
            "Secret not found: x",
            404,
            attempts=1,
        )

        assert outcome_attributes(outcome) == {
            PREFIX + "error": "Secret not found: x",
            PREFIX + "status.code": 404,
        }

    def test_failure_without_status(self):
        """Test configuration failures carry no status code."""
        outcome = OutcomeRecord.failure(
            RetrievalState.PERMANENT_FAILURE,
            ErrorCode.CONFIGURATION_ERROR,
            "Secret name not specified",
        )

        assert outcome_attributes(outcome) == {
            PREFIX + "error": "Secret name not specified"
        }

    def test_custom_prefix(self):
        """Test a custom attribute prefix."""
        outcome = OutcomeRecord.success(SecretResult(value="x"), attempts=1)

        attributes = outcome_attributes(outcome, prefix="vault.")

        assert attributes["vault.value"] == "x"


class TestWriteOutcome:
    """Test writing outcomes into a message."""

    def test_replaces_previous_attributes(self):
        """Test stale attributes from an earlier run are removed."""
        message = {
            PREFIX + "error": "old failure",
            PREFIX + "status.code": 500,
            "http.method": "GET",
        }
        outcome = OutcomeRecord.success(SecretResult(value="fresh"), attempts=1)

        write_outcome(outcome, message)

        assert PREFIX + "error" not in message
        assert message[PREFIX + "value"] == "fresh"
        assert message[PREFIX + "status.code"] == 200
        assert message["http.method"] == "GET"
