"""Domain models for the secret gateway adapter."""

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, model_validator

DEFAULT_REGION = "us-east-1"
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1000


class CredentialType(str, Enum):
    """Credential types accepted in the adapter configuration."""

    IAM = "iam"
    FILE = "file"
    PROFILE = "profile"
    LOCAL = "local"


class ValueType(str, Enum):
    """Shape of the secret payload returned by the store."""

    TEXT = "text"
    BINARY = "binary"


class RetrievalState(str, Enum):
    """States of a single retrieval invocation."""

    VALIDATING = "validating"
    FETCHING = "fetching"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    PERMANENT_FAILURE = "permanent_failure"
    EXHAUSTED_FAILURE = "exhausted_failure"


class ErrorCode(str, Enum):
    """Standardized error codes."""

    CONFIGURATION_ERROR = "configuration_error"
    SECRET_NOT_FOUND = "secret_not_found"
    INVALID_REQUEST = "invalid_request"
    DECRYPTION_FAILURE = "decryption_failure"
    INTERNAL_SERVICE_ERROR = "internal_service_error"
    UNCLASSIFIED_ERROR = "unclassified_error"
    RETRY_EXHAUSTED = "retry_exhausted"
    RETRY_INTERRUPTED = "retry_interrupted"
    CIPHER_ERROR = "cipher_error"
    UNEXPECTED_ERROR = "unexpected_error"


class GatewayModel(BaseModel):
    """Base model for immutable gateway values."""

    model_config = ConfigDict(frozen=True, extra="forbid")


# Requests
class RetrievalRequest(GatewayModel):
    """A single secret lookup, built fresh for every invocation."""

    secret_id: str
    region: str = DEFAULT_REGION
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    retry_delay_ms: int = Field(default=DEFAULT_RETRY_DELAY_MS, ge=0)
    version_id: str | None = None
    version_stage: str | None = None

    @property
    def max_attempts(self) -> int:
        """Total attempts, counting the first call. Never less than one."""
        return max(1, self.max_retries)

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000.0


# Credential specifications
class IamRoleCredentials(GatewayModel):
    """Ambient workload identity (web identity token, container or instance role)."""

    kind: Literal["iam"] = "iam"


class FileCredentials(GatewayModel):
    """Named profile read from an explicit credentials file."""

    kind: Literal["file"] = "file"
    path: str
    profile: str = "default"


class ProfileCredentials(GatewayModel):
    """Named profile resolved from the shared AWS config and credentials files."""

    kind: Literal["profile"] = "profile"
    profile: str


class LocalCredentials(GatewayModel):
    """Static or session credentials parsed from an inline ``key:secret[:token]`` string."""

    kind: Literal["local"] = "local"
    access_key: str
    secret_key: SecretStr
    session_token: SecretStr | None = None

    @property
    def is_session(self) -> bool:
        return self.session_token is not None


class InlineCredentials(GatewayModel):
    """Explicit long-lived key pair supplied programmatically."""

    kind: Literal["inline"] = "inline"
    access_key: str
    secret_key: SecretStr


class DefaultChainCredentials(GatewayModel):
    """The standard botocore provider chain."""

    kind: Literal["default"] = "default"


CredentialSpec = Annotated[
    IamRoleCredentials
    | FileCredentials
    | ProfileCredentials
    | LocalCredentials
    | InlineCredentials
    | DefaultChainCredentials,
    Field(discriminator="kind"),
]


# Outcomes
class SecretResult(GatewayModel):
    """Normalized secret value with its metadata."""

    value: str | None = None
    value_type: ValueType = ValueType.TEXT
    arn: str | None = None
    name: str | None = None
    version_id: str | None = None
    version_stages: list[str] = Field(default_factory=list)


class ErrorOutcome(GatewayModel):
    """Failure reported back to the caller."""

    kind: ErrorCode
    message: str
    status_code: int | None = None


class OutcomeRecord(GatewayModel):
    """Exactly one of ``result`` or ``error`` for one invocation."""

    state: RetrievalState
    attempts: int = 0
    result: SecretResult | None = None
    error: ErrorOutcome | None = None

    @model_validator(mode="after")
    def check_single_outcome(self) -> "OutcomeRecord":
        if (self.result is None) == (self.error is None):
            raise ValueError("Exactly one of result or error must be set")
        return self

    @property
    def succeeded(self) -> bool:
        return self.result is not None

    @property
    def status_code(self) -> int | None:
        if self.result is not None:
            return 200
        return self.error.status_code if self.error else None

    @classmethod
    def success(cls, result: SecretResult, attempts: int) -> "OutcomeRecord":
        return cls(state=RetrievalState.SUCCEEDED, attempts=attempts, result=result)

    @classmethod
    def failure(
        cls,
        state: RetrievalState,
        kind: ErrorCode,
        message: str,
        status_code: int | None = None,
        attempts: int = 0,
    ) -> "OutcomeRecord":
        return cls(
            state=state,
            attempts=attempts,
            error=ErrorOutcome(kind=kind, message=message, status_code=status_code),
        )
