"""Credential sources that produce boto3 sessions.

Every source is immutable once built and can create any number of sessions;
botocore refreshes temporary credentials inside each session on its own.
"""

from abc import ABC, abstractmethod

import boto3
import botocore.session
from botocore.credentials import CredentialResolver, SharedCredentialProvider
from pydantic import SecretStr

# botocore provider methods that rely on the workload identity only
AMBIENT_IDENTITY_METHODS = (
    "assume-role-with-web-identity",
    "container-role",
    "iam-role",
)


class CredentialSource(ABC):
    """A usable credential provider bound to one configuration."""

    kind: str = "abstract"

    @property
    @abstractmethod
    def description(self) -> str:
        """Human readable summary. Never contains key material."""

    @abstractmethod
    def create_session(self) -> boto3.Session:
        """Build a new boto3 session using these credentials."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.description})"


class DefaultChainSource(CredentialSource):
    """The standard botocore chain (environment, shared files, SSO, roles)."""

    kind = "default"

    @property
    def description(self) -> str:
        return "default provider chain"

    def create_session(self) -> boto3.Session:
        return boto3.Session()


class AmbientIdentitySource(CredentialSource):
    """Workload identity only: web identity token, container role or instance role.

    The standard resolver is pruned down to the identity providers so that no
    environment keys or shared files are ever consulted.
    """

    kind = "iam"

    @property
    def description(self) -> str:
        return "ambient workload identity"

    def create_session(self) -> boto3.Session:
        core_session = botocore.session.Session()
        resolver = core_session.get_component("credential_provider")
        for method in [provider.METHOD for provider in resolver.providers]:
            if method not in AMBIENT_IDENTITY_METHODS:
                resolver.remove(method)
        return boto3.Session(botocore_session=core_session)


class SharedFileSource(CredentialSource):
    """A named profile read from one explicit credentials file."""

    kind = "file"

    def __init__(self, path: str, profile: str):
        self.path = path
        self.profile = profile

    @property
    def description(self) -> str:
        return f"credentials file {self.path} (profile {self.profile})"

    def create_session(self) -> boto3.Session:
        core_session = botocore.session.Session()
        core_session.register_component(
            "credential_provider",
            CredentialResolver(
                providers=[
                    SharedCredentialProvider(
                        creds_filename=self.path, profile_name=self.profile
                    )
                ]
            ),
        )
        return boto3.Session(botocore_session=core_session)


class NamedProfileSource(CredentialSource):
    """A profile from the shared AWS config and credentials files."""

    kind = "profile"

    def __init__(self, profile: str):
        self.profile = profile

    @property
    def description(self) -> str:
        return f"profile {self.profile}"

    def create_session(self) -> boto3.Session:
        return boto3.Session(profile_name=self.profile)


class StaticKeySource(CredentialSource):
    """A fixed access key pair, optionally with a session token."""

    kind = "static"

    def __init__(
        self,
        access_key: str,
        secret_key: SecretStr,
        session_token: SecretStr | None = None,
    ):
        self.access_key = access_key
        self._secret_key = secret_key
        self._session_token = session_token

    @property
    def is_session(self) -> bool:
        return self._session_token is not None

    @property
    def description(self) -> str:
        kind = "session" if self.is_session else "static"
        return f"{kind} credentials for {mask_access_key(self.access_key)}"

    def create_session(self) -> boto3.Session:
        session_kwargs = {
            "aws_access_key_id": self.access_key,
            "aws_secret_access_key": self._secret_key.get_secret_value(),
        }
        if self._session_token is not None:
            session_kwargs["aws_session_token"] = self._session_token.get_secret_value()
        return boto3.Session(**session_kwargs)


def mask_access_key(access_key: str) -> str:
    """Keep the last four characters of an access key id."""
    if len(access_key) <= 4:
        return "****"
    return f"{'*' * (len(access_key) - 4)}{access_key[-4:]}"
