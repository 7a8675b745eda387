"""Normalization of secret store responses into flat output attributes."""

import base64
from collections.abc import Mapping, MutableMapping
from typing import Any

from ..domain.models import OutcomeRecord, SecretResult, ValueType

DEFAULT_ATTRIBUTE_PREFIX = "aws.secretsmanager."

VALUE = "value"
VALUE_TYPE = "value.type"
STATUS_CODE = "status.code"
ERROR = "error"
ARN = "arn"
NAME = "name"
VERSION_ID = "version.id"
VERSION_STAGES = "version.stages"

ATTRIBUTE_NAMES = (
    VALUE,
    VALUE_TYPE,
    STATUS_CODE,
    ERROR,
    ARN,
    NAME,
    VERSION_ID,
    VERSION_STAGES,
)


def normalize_secret(response: Mapping[str, Any]) -> SecretResult:
    """Build a ``SecretResult`` from a ``get_secret_value`` response.

    Text payloads are kept as-is. Binary payloads are base64 encoded.
    """
    secret_string = response.get("SecretString")
    secret_binary = response.get("SecretBinary")

    if secret_string is not None:
        value, value_type = secret_string, ValueType.TEXT
    elif secret_binary is not None:
        if isinstance(secret_binary, str):
            secret_binary = secret_binary.encode()
        value = base64.b64encode(bytes(secret_binary)).decode("ascii")
        value_type = ValueType.BINARY
    else:
        value, value_type = None, ValueType.TEXT

    return SecretResult(
        value=value,
        value_type=value_type,
        arn=response.get("ARN"),
        name=response.get("Name"),
        version_id=response.get("VersionId"),
        version_stages=list(response.get("VersionStages") or []),
    )


def outcome_attributes(
    outcome: OutcomeRecord, prefix: str = DEFAULT_ATTRIBUTE_PREFIX
) -> dict[str, Any]:
    """Flatten an outcome into prefixed attribute names and values."""
    attributes: dict[str, Any] = {}

    if outcome.result is not None:
        result = outcome.result
        if result.value is not None:
            attributes[prefix + VALUE] = result.value
        if result.value_type == ValueType.BINARY:
            attributes[prefix + VALUE_TYPE] = result.value_type.value
        attributes[prefix + STATUS_CODE] = 200
        if result.arn is not None:
            attributes[prefix + ARN] = result.arn
        if result.name is not None:
            attributes[prefix + NAME] = result.name
        if result.version_id is not None:
            attributes[prefix + VERSION_ID] = result.version_id
        if result.version_stages:
            attributes[prefix + VERSION_STAGES] = ",".join(result.version_stages)
        return attributes

    error = outcome.error
    attributes[prefix + ERROR] = error.message
    if error.status_code is not None:
        attributes[prefix + STATUS_CODE] = error.status_code
    return attributes


def write_outcome(
    outcome: OutcomeRecord,
    message: MutableMapping[str, Any],
    prefix: str = DEFAULT_ATTRIBUTE_PREFIX,
) -> None:
    """Write the outcome into ``message``, replacing attributes from earlier runs."""
    for name in ATTRIBUTE_NAMES:
        message.pop(prefix + name, None)
    message.update(outcome_attributes(outcome, prefix))
