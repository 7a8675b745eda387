#!/usr/bin/env python3
"""Manage ``test-`` prefixed secrets for manual end-to-end checks.

Creates a fixed set of text and JSON secrets, lists and views them through
the adapter, and deletes them again. Also encrypts proxy passwords for use
in a ``clientConfiguration`` section.
"""

import argparse
import getpass
import json
import sys
from pathlib import Path

# Add scripts directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from colors import (
    dim,
    info,
    print_error,
    print_info,
    print_section,
    print_step,
    print_success,
    print_warning,
)
from secret_gateway.adapter import SecretGatewayAdapter
from secret_gateway.config.settings import configure_logging, get_settings
from secret_gateway.transport.cipher import ConfigCipher

TEST_PREFIX = "test-"
DEFAULT_REGION = "us-east-1"

TEST_SECRETS: dict[str, str | dict] = {
    "test-api-key": "sk-1234567890abcdef1234567890abcdef1234567890abcdef",
    "test-database-password": "MySuperSecretPassword123!",
    "test-database-credentials": {
        "host": "test-db.example.com",
        "port": 5432,
        "database": "testdb",
        "username": "testuser",
        "password": "TestPassword123!",
    },
    "test-api-config": {
        "baseUrl": "https://api.example.com",
        "timeout": 30000,
        "retryAttempts": 3,
        "apiKey": "api-key-1234567890abcdef",
    },
    "test-encryption-key": "encryption-key-32-chars-long-1234567890abcdef",
    "test-webhook-url": "https://webhook.example.com/notify/1234567890abcdef",
}


def secrets_client(args: argparse.Namespace):
    session = boto3.Session(profile_name=args.profile, region_name=args.region)
    return session.client("secretsmanager")


def confirm(prompt: str, assume_yes: bool) -> bool:
    if assume_yes:
        return True
    answer = input(f"{prompt} (y/N): ")
    return answer.strip().lower() in ("y", "yes")


def test_secret_names(client) -> list[str]:
    paginator = client.get_paginator("list_secrets")
    names = []
    for page in paginator.paginate(Filters=[{"Key": "name", "Values": [TEST_PREFIX]}]):
        names.extend(
            entry["Name"]
            for entry in page["SecretList"]
            if entry["Name"].startswith(TEST_PREFIX)
        )
    return sorted(names)


def create_secrets(args: argparse.Namespace) -> int:
    """Create or update the test secrets."""
    client = secrets_client(args)
    print_section("Creating test secrets")

    total = len(TEST_SECRETS)
    for step, (name, value) in enumerate(TEST_SECRETS.items(), start=1):
        secret_string = value if isinstance(value, str) else json.dumps(value)
        print_step(step, total, name)
        try:
            client.create_secret(Name=name, SecretString=secret_string)
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceExistsException":
                raise
            client.put_secret_value(SecretId=name, SecretString=secret_string)
            print(dim("  updated existing secret"))

    print_success(f"{total} test secrets ready in {args.region}")
    return 0


def list_secrets(args: argparse.Namespace) -> int:
    """List secrets that carry the test prefix."""
    names = test_secret_names(secrets_client(args))
    if not names:
        print_info("No test secrets found")
        return 0

    print_section(f"Test secrets in {args.region}")
    for name in names:
        print(f"  - {name}")
    return 0


def view_secret(args: argparse.Namespace) -> int:
    """Fetch one secret through the adapter and print its attributes."""
    config = {
        "secretName": args.name,
        "secretRegion": args.region,
        "maxRetries": str(args.max_retries),
        "retryDelay": "500",
        "credentialType": "profile" if args.profile else "",
        "awsProfile": args.profile or "",
    }
    adapter = SecretGatewayAdapter.from_config(config, get_settings())
    message: dict = {}
    succeeded = adapter.invoke(message)

    print_section(f"Secret {args.name}")
    for key, value in sorted(message.items()):
        if key.endswith(".value") and not args.show_value:
            value = "*" * 8
        print(f"  {key}: {info(str(value))}")

    if not succeeded:
        print_error("Secret could not be retrieved")
        return 1
    return 0


def delete_secret(args: argparse.Namespace) -> int:
    """Delete one secret without a recovery window."""
    if not confirm(f"Delete secret '{args.name}'?", args.yes):
        print_warning("Operation cancelled")
        return 1

    secrets_client(args).delete_secret(
        SecretId=args.name, ForceDeleteWithoutRecovery=True
    )
    print_success(f"Secret deleted: {args.name}")
    return 0


def delete_all_secrets(args: argparse.Namespace) -> int:
    """Delete every secret carrying the test prefix."""
    client = secrets_client(args)
    names = test_secret_names(client)
    if not names:
        print_info("No test secrets found")
        return 0

    print_warning("This action cannot be undone")
    for name in names:
        print(f"  - {name}")
    if not confirm(f"Delete all {len(names)} test secrets?", args.yes):
        print_warning("Operation cancelled")
        return 1

    for name in names:
        client.delete_secret(SecretId=name, ForceDeleteWithoutRecovery=True)
        print(dim(f"  deleted {name}"))
    print_success("All test secrets have been deleted")
    return 0


def encrypt_password(args: argparse.Namespace) -> int:
    """Encrypt a proxy password for the client configuration."""
    settings = get_settings()
    passphrase = args.passphrase
    if passphrase is None and settings.cipher.passphrase is not None:
        passphrase = settings.cipher.passphrase.get_secret_value()
    if not passphrase:
        print_error("Set SECRET_GATEWAY_CIPHER_PASSPHRASE or pass --passphrase")
        return 1

    cipher = ConfigCipher.from_passphrase(passphrase, settings.cipher.salt)
    password = getpass.getpass("Proxy password: ")
    print(cipher.encrypt(password))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Manage test secrets in AWS Secrets Manager"
    )
    parser.add_argument(
        "--region",
        "-r",
        default=DEFAULT_REGION,
        help=f"AWS region (default: {DEFAULT_REGION})",
    )
    parser.add_argument("--profile", "-p", help="AWS profile to use")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("create", help="Create or update the test secrets").set_defaults(
        handler=create_secrets
    )
    commands.add_parser("list", help="List test secrets").set_defaults(
        handler=list_secrets
    )

    view = commands.add_parser("view", help="Retrieve a secret through the adapter")
    view.add_argument("name")
    view.add_argument("--show-value", action="store_true", help="Print the value")
    view.add_argument("--max-retries", type=int, default=3)
    view.set_defaults(handler=view_secret)

    delete = commands.add_parser("delete", help="Delete one secret")
    delete.add_argument("name")
    delete.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    delete.set_defaults(handler=delete_secret)

    delete_all = commands.add_parser("delete-all", help="Delete all test secrets")
    delete_all.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    delete_all.set_defaults(handler=delete_all_secrets)

    encrypt = commands.add_parser(
        "encrypt-password", help="Encrypt a proxy password"
    )
    encrypt.add_argument("--passphrase", help="Cipher passphrase")
    encrypt.set_defaults(handler=encrypt_password)

    return parser


def main() -> None:
    args = build_parser().parse_args()
    configure_logging()
    try:
        sys.exit(args.handler(args))
    except (BotoCoreError, ClientError) as e:
        print_error(f"AWS request failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        print_warning("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main()
