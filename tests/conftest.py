"""Test configuration and fixtures."""

import os

import boto3
import pytest
from botocore.stub import Stubber

# Set required environment variables for tests
os.environ["ENVIRONMENT"] = "testing"
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

from secret_gateway.config.settings import TestingSettings
from secret_gateway.observability.logging import setup_testing_logging

SECRET_ARN = (
    "arn:aws:secretsmanager:us-east-1:123456789012:secret:test-db-password-AbCdEf"
)
VERSION_ID = "01234567-89ab-cdef-0123-456789abcdef"


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Route logs through the testing configuration."""
    setup_testing_logging()


@pytest.fixture
def settings():
    """Testing settings with zero retry delay."""
    return TestingSettings()


@pytest.fixture
def secretsmanager_client():
    """A real Secrets Manager client with static fake credentials."""
    session = boto3.Session(
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        region_name="us-east-1",
    )
    return session.client("secretsmanager", region_name="us-east-1")


@pytest.fixture
def stubber(secretsmanager_client):
    """Stubber bound to the Secrets Manager client."""
    with Stubber(secretsmanager_client) as stub:
        yield stub


def _secret_response(
    secret_string: str | None = "s3cr3t",
    secret_binary: bytes | None = None,
    version_stages: list[str] | None = None,
) -> dict:
    """Build a get_secret_value response."""
    response = {
        "ARN": SECRET_ARN,
        "Name": "test-db-password",
        "VersionId": VERSION_ID,
    }
    if secret_string is not None:
        response["SecretString"] = secret_string
    if secret_binary is not None:
        response["SecretBinary"] = secret_binary
    if version_stages:
        response["VersionStages"] = version_stages
    return response


@pytest.fixture
def secret_response():
    """Factory for get_secret_value responses."""
    return _secret_response
