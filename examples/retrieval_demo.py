"""Demonstration of secret retrieval through the gateway adapter.

Runs offline: the Secrets Manager client is stubbed so the demo shows
templated fields, retry on transient errors, fail-fast on permanent errors
and binary payloads without touching AWS.
"""

import asyncio
import uuid
from unittest.mock import Mock

import boto3
from botocore.stub import Stubber

from secret_gateway.adapter import SecretGatewayAdapter
from secret_gateway.config.settings import GatewaySettings, RetrievalSettings
from secret_gateway.observability.logging import LogFormat, LogLevel, setup_logging

ARN = "arn:aws:secretsmanager:us-east-1:123456789012:secret:demo-api-key-AbCdEf"


def stubbed_adapter(config: dict) -> tuple[SecretGatewayAdapter, Stubber]:
    """Attach an adapter whose clients all share one stubbed client."""
    client = boto3.Session(
        aws_access_key_id="demo",
        aws_secret_access_key="demo",
        region_name="us-east-1",
    ).client("secretsmanager")
    settings = GatewaySettings(
        retrieval=RetrievalSettings(default_retry_delay_ms=200)
    )
    adapter = SecretGatewayAdapter.from_config(config, settings)
    adapter.retriever.clients.get = Mock(return_value=client)
    return adapter, Stubber(client)


def response(name: str, **payload) -> dict:
    return {
        "ARN": ARN,
        "Name": name,
        "VersionId": str(uuid.uuid4()),
        "VersionStages": ["AWSCURRENT"],
        **payload,
    }


def show(message: dict) -> None:
    for key, value in sorted(message.items()):
        if key.startswith("aws.secretsmanager."):
            print(f"   {key} = {value}")


def demo_templated_fields():
    """Demonstrate resolving the secret name from the message."""
    print("\n=== Templated Fields Demo ===")

    adapter, stubber = stubbed_adapter(
        {"secretName": "${http.querystring.env}/api-key"}
    )
    stubber.add_response(
        "get_secret_value",
        response("prod/api-key", SecretString="sk-demo"),
        {"SecretId": "prod/api-key"},
    )

    message = {"http": {"querystring": {"env": "prod"}}}
    with stubber:
        succeeded = adapter.invoke(message)

    print(f"{'✅' if succeeded else '❌'} Retrieved prod/api-key")
    show(message)


def demo_retry():
    """Demonstrate retry on transient failures."""
    print("\n=== Retry Demo ===")

    adapter, stubber = stubbed_adapter({"secretName": "demo-api-key", "maxRetries": "3"})
    for _ in range(2):
        stubber.add_client_error(
            "get_secret_value",
            service_error_code="InternalServiceError",
            service_message="Service unavailable",
            http_status_code=500,
        )
    stubber.add_response(
        "get_secret_value", response("demo-api-key", SecretString="sk-demo")
    )

    message: dict = {}
    with stubber:
        outcome = adapter.retrieve(message)

    print(f"✅ Succeeded after {outcome.attempts} attempts")


def demo_permanent_failure():
    """Demonstrate fail-fast on a missing secret."""
    print("\n=== Permanent Failure Demo ===")

    adapter, stubber = stubbed_adapter({"secretName": "missing-secret"})
    stubber.add_client_error(
        "get_secret_value",
        service_error_code="ResourceNotFoundException",
        service_message="Secrets Manager can't find the specified secret.",
        http_status_code=400,
    )

    message: dict = {}
    with stubber:
        adapter.invoke(message)

    print("❌ Lookup failed without retrying")
    show(message)


async def demo_async_binary():
    """Demonstrate the async path with a binary secret."""
    print("\n=== Async Binary Secret Demo ===")

    adapter, stubber = stubbed_adapter({"secretName": "demo-certificate"})
    stubber.add_response(
        "get_secret_value",
        response("demo-certificate", SecretBinary=b"\x30\x82\x01\x0a"),
    )

    message: dict = {}
    with stubber:
        await adapter.ainvoke(message)

    show(message)


async def main():
    """Run all retrieval demonstrations."""
    setup_logging(level=LogLevel.WARNING, format_type=LogFormat.CONSOLE)

    print("🔐 Secret Gateway Retrieval Demonstration")
    print("=" * 50)

    try:
        demo_templated_fields()
        demo_retry()
        demo_permanent_failure()
        await demo_async_binary()

        print("\n✅ All demonstrations completed successfully!")

    except Exception as e:
        print(f"\n❌ Demonstration failed: {e}")
        raise


if __name__ == "__main__":
    asyncio.run(main())
