"""Field selectors resolved against the inbound message.

Each configured field is either a literal or a template holding ``${name}``
expressions. Names may be dotted (``${http.querystring.secret}``); a flat key
of that exact name wins over nested traversal. Anything that cannot be
resolved renders as the empty string, so callers never see ``None``.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..observability.logging import get_logger

logger = get_logger(__name__)

_EXPRESSION = re.compile(r"\$\{([^{}]*)\}")

# Configuration keys as they appear in the filter definition
SECRET_NAME = "secretName"
SECRET_REGION = "secretRegion"
MAX_RETRIES = "maxRetries"
RETRY_DELAY = "retryDelay"
CREDENTIAL_TYPE = "credentialType"
CREDENTIALS_FILE_PATH = "credentialsFilePath"
AWS_PROFILE = "awsProfile"
AWS_CREDENTIAL = "awsCredential"
CLIENT_CONFIGURATION = "clientConfiguration"
SECRET_VERSION_ID = "secretVersionId"
SECRET_VERSION_STAGE = "secretVersionStage"

SENSITIVE_FIELDS = frozenset({AWS_CREDENTIAL})


def lookup(message: Mapping[str, Any], name: str) -> Any:
    """Find ``name`` in the message by exact key, then by dotted path."""
    if name in message:
        return message[name]

    current: Any = message
    for part in name.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return None
    return current


def _render(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


@dataclass(frozen=True)
class Selector:
    """A literal or templated configuration value."""

    literal: str

    @property
    def is_dynamic(self) -> bool:
        return _EXPRESSION.search(self.literal) is not None

    def substitute(self, message: Mapping[str, Any] | None) -> str:
        """Resolve every expression against ``message``."""
        if not self.is_dynamic:
            return self.literal

        def replace(match: re.Match[str]) -> str:
            name = match.group(1).strip()
            if not name or message is None:
                return ""
            try:
                return _render(lookup(message, name))
            except Exception as e:
                logger.warning(
                    "Could not resolve selector expression",
                    expression=name,
                    error=str(e),
                )
                return ""

        return _EXPRESSION.sub(replace, self.literal)


def _coerce_literal(config: Mapping[str, Any] | None, key: str) -> str:
    if config is None:
        return ""
    try:
        raw = config.get(key)
    except Exception as e:
        logger.warning("Could not read configuration field", field=key, error=str(e))
        return ""
    if raw is None:
        return ""
    if isinstance(raw, str | int | float):
        return str(raw)
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    if isinstance(raw, Mapping):
        # Structured sections such as clientConfiguration are read directly
        return ""
    logger.warning(
        "Ignoring non-scalar configuration field",
        field=key,
        value_type=type(raw).__name__,
    )
    return ""


@dataclass(frozen=True)
class AdapterFields:
    """All selectors the adapter reads, built once at attach time."""

    secret_name: Selector
    region: Selector
    max_retries: Selector
    retry_delay: Selector
    credential_type: Selector
    credentials_file_path: Selector
    aws_profile: Selector
    aws_credential: Selector
    client_configuration: Selector
    version_id: Selector
    version_stage: Selector

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None) -> "AdapterFields":
        def selector(key: str) -> Selector:
            return Selector(_coerce_literal(config, key))

        return cls(
            secret_name=selector(SECRET_NAME),
            region=selector(SECRET_REGION),
            max_retries=selector(MAX_RETRIES),
            retry_delay=selector(RETRY_DELAY),
            credential_type=selector(CREDENTIAL_TYPE),
            credentials_file_path=selector(CREDENTIALS_FILE_PATH),
            aws_profile=selector(AWS_PROFILE),
            aws_credential=selector(AWS_CREDENTIAL),
            client_configuration=selector(CLIENT_CONFIGURATION),
            version_id=selector(SECRET_VERSION_ID),
            version_stage=selector(SECRET_VERSION_STAGE),
        )

    def describe(self) -> dict[str, str]:
        """Literal values for the attach summary, with sensitive ones masked."""
        described = {
            SECRET_NAME: self.secret_name,
            SECRET_REGION: self.region,
            MAX_RETRIES: self.max_retries,
            RETRY_DELAY: self.retry_delay,
            CREDENTIAL_TYPE: self.credential_type,
            CREDENTIALS_FILE_PATH: self.credentials_file_path,
            AWS_PROFILE: self.aws_profile,
            AWS_CREDENTIAL: self.aws_credential,
            SECRET_VERSION_ID: self.version_id,
            SECRET_VERSION_STAGE: self.version_stage,
        }
        summary = {}
        for key, field in described.items():
            if key in SENSITIVE_FIELDS and field.literal:
                summary[key] = "***"
            elif field.is_dynamic:
                summary[key] = f"dynamic({field.literal})"
            else:
                summary[key] = field.literal
        return summary
