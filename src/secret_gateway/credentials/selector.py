"""Credential provider selection.

Selection runs in two steps. ``select_credential_spec`` maps the configured
credential type onto a ``CredentialSpec`` variant through a closed dispatch
table. ``build_credential_source`` turns the spec into a usable source and
checks whatever can be checked up front (file contents, profile presence).
Both steps fall back to the default provider chain instead of raising.
"""

import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import botocore.session
from botocore.credentials import SharedCredentialProvider
from pydantic import SecretStr

from ..domain.models import (
    CredentialSpec,
    CredentialType,
    DefaultChainCredentials,
    FileCredentials,
    IamRoleCredentials,
    InlineCredentials,
    LocalCredentials,
    ProfileCredentials,
)
from ..observability.logging import get_logger
from .providers import (
    AmbientIdentitySource,
    CredentialSource,
    DefaultChainSource,
    NamedProfileSource,
    SharedFileSource,
    StaticKeySource,
)

logger = get_logger(__name__)

DEFAULT_PROFILE = "default"


@dataclass(frozen=True)
class CredentialInputs:
    """Resolved configuration values that feed credential selection."""

    credential_type: str = ""
    credentials_file_path: str = ""
    aws_profile: str = ""
    aws_credential: str = ""
    inline: InlineCredentials | None = None
    default_profile: str = DEFAULT_PROFILE


def parse_credential_type(value: str) -> CredentialType:
    """Exact, case-sensitive match. Blank and unknown values mean ``local``."""
    try:
        return CredentialType(value)
    except ValueError:
        if value:
            logger.warning(
                "Unknown credential type, treating as local", credential_type=value
            )
        return CredentialType.LOCAL


def parse_inline_credential(text: str) -> LocalCredentials | None:
    """Parse ``key:secret`` or ``key:secret:token``. Returns None when malformed."""
    if not text or not text.strip():
        return None

    parts = text.strip().split(":")
    if len(parts) not in (2, 3) or not all(part.strip() for part in parts):
        return None

    access_key, secret_key = parts[0].strip(), parts[1].strip()
    session_token = SecretStr(parts[2].strip()) if len(parts) == 3 else None
    return LocalCredentials(
        access_key=access_key,
        secret_key=SecretStr(secret_key),
        session_token=session_token,
    )


def _iam_spec(inputs: CredentialInputs) -> CredentialSpec:
    return IamRoleCredentials()


def _file_spec(inputs: CredentialInputs) -> CredentialSpec:
    path = inputs.credentials_file_path.strip()
    if not path:
        logger.info("Credentials file path not specified, using default chain")
        return DefaultChainCredentials()
    profile = inputs.aws_profile.strip() or inputs.default_profile
    return FileCredentials(path=path, profile=profile)


def _profile_spec(inputs: CredentialInputs) -> CredentialSpec:
    profile = inputs.aws_profile.strip()
    if not profile:
        logger.info("AWS profile not specified, using default chain")
        return DefaultChainCredentials()
    return ProfileCredentials(profile=profile)


def _local_spec(inputs: CredentialInputs) -> CredentialSpec:
    if inputs.aws_credential.strip():
        parsed = parse_inline_credential(inputs.aws_credential)
        if parsed is not None:
            return parsed
        logger.warning("Malformed inline credential, using default chain")
        return DefaultChainCredentials()
    if inputs.inline is not None:
        return inputs.inline
    logger.info("No explicit credentials configured, using default chain")
    return DefaultChainCredentials()


_SPEC_HANDLERS: dict[CredentialType, Callable[[CredentialInputs], CredentialSpec]] = {
    CredentialType.IAM: _iam_spec,
    CredentialType.FILE: _file_spec,
    CredentialType.PROFILE: _profile_spec,
    CredentialType.LOCAL: _local_spec,
}


def select_credential_spec(inputs: CredentialInputs) -> CredentialSpec:
    """Map the configured credential type onto a credential spec."""
    credential_type = parse_credential_type(inputs.credential_type)
    handler = _SPEC_HANDLERS.get(credential_type)
    if handler is None:
        return DefaultChainCredentials()
    return handler(inputs)


def _file_source(spec: FileCredentials) -> CredentialSource:
    path = os.path.expanduser(spec.path)
    try:
        credentials = SharedCredentialProvider(
            creds_filename=path, profile_name=spec.profile
        ).load()
    except Exception as e:
        logger.error(
            "Error loading credentials file, using default chain",
            path=path,
            profile=spec.profile,
            error=str(e),
        )
        return DefaultChainSource()

    if credentials is None:
        logger.error(
            "Profile not found in credentials file, using default chain",
            path=path,
            profile=spec.profile,
        )
        return DefaultChainSource()

    return SharedFileSource(path=path, profile=spec.profile)


def _profile_source(spec: ProfileCredentials) -> CredentialSource:
    try:
        available = botocore.session.Session().available_profiles
    except Exception as e:
        logger.error(
            "Error reading AWS profiles, using default chain",
            profile=spec.profile,
            error=str(e),
        )
        return DefaultChainSource()

    if spec.profile not in available:
        logger.warning(
            "AWS profile not found, using default chain", profile=spec.profile
        )
        return DefaultChainSource()
    return NamedProfileSource(spec.profile)


def _local_source(spec: LocalCredentials) -> CredentialSource:
    return StaticKeySource(spec.access_key, spec.secret_key, spec.session_token)


def _inline_source(spec: InlineCredentials) -> CredentialSource:
    return StaticKeySource(spec.access_key, spec.secret_key)


_SOURCE_BUILDERS: dict[type, Callable[[Any], CredentialSource]] = {
    IamRoleCredentials: lambda spec: AmbientIdentitySource(),
    FileCredentials: _file_source,
    ProfileCredentials: _profile_source,
    LocalCredentials: _local_source,
    InlineCredentials: _inline_source,
    DefaultChainCredentials: lambda spec: DefaultChainSource(),
}


def build_credential_source(spec: CredentialSpec) -> CredentialSource:
    """Materialize a credential spec into a usable source."""
    builder = _SOURCE_BUILDERS.get(type(spec))
    if builder is None:
        return DefaultChainSource()
    return builder(spec)


def select_credential_source(inputs: CredentialInputs) -> CredentialSource:
    """Select a credential source. Never raises."""
    try:
        spec = select_credential_spec(inputs)
        source = build_credential_source(spec)
    except Exception as e:
        logger.error(
            "Credential selection failed, using default chain",
            credential_type=inputs.credential_type,
            error=str(e),
        )
        return DefaultChainSource()

    logger.info(
        "Selected credential source",
        credential_type=inputs.credential_type or CredentialType.LOCAL.value,
        source=source.description,
    )
    return source
