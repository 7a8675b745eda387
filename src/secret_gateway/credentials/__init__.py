"""Credential provider selection for the secret store client."""

from .providers import (
    AmbientIdentitySource,
    CredentialSource,
    DefaultChainSource,
    NamedProfileSource,
    SharedFileSource,
    StaticKeySource,
)
from .selector import (
    CredentialInputs,
    build_credential_source,
    parse_credential_type,
    parse_inline_credential,
    select_credential_source,
    select_credential_spec,
)

__all__ = [
    "AmbientIdentitySource",
    "CredentialInputs",
    "CredentialSource",
    "DefaultChainSource",
    "NamedProfileSource",
    "SharedFileSource",
    "StaticKeySource",
    "build_credential_source",
    "parse_credential_type",
    "parse_inline_credential",
    "select_credential_source",
    "select_credential_spec",
]
