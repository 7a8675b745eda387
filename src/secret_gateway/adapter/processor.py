"""Adapter that resolves a secret for each inbound message.

``attach`` takes the filter configuration once and freezes everything that
does not depend on the message: field selectors, the credential source and the
transport configuration. ``invoke`` resolves the per-message fields, runs the
retrieval and writes the outcome attributes back into the message.
"""

from collections.abc import Mapping, MutableMapping
from typing import Any

from ..config.settings import GatewaySettings, get_settings
from ..credentials.selector import CredentialInputs, select_credential_source
from ..domain.exceptions import RetrievalCancelledError
from ..domain.models import ErrorCode, OutcomeRecord, RetrievalRequest, RetrievalState
from ..observability.logging import InvocationContext, get_logger
from ..retrieval.client_cache import RegionClientCache
from ..retrieval.engine import CancellationToken, SecretRetriever, build_request
from ..retrieval.normalizer import write_outcome
from ..transport.cipher import ConfigCipher
from ..transport.client_config import build_transport_config
from .fields import CLIENT_CONFIGURATION, AdapterFields

logger = get_logger(__name__)

CLIENT_NOT_CONFIGURED = "AWS Secrets Manager client was not configured"
UNEXPECTED_ERROR = "Unexpected error while retrieving secret"


class SecretGatewayAdapter:
    """Secret retrieval step of a message-processing pipeline."""

    def __init__(self, settings: GatewaySettings | None = None):
        self.settings = settings or get_settings()
        self.fields: AdapterFields | None = None
        self.retriever: SecretRetriever | None = None
        self.cancellation = CancellationToken()

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any] | None,
        settings: GatewaySettings | None = None,
        cipher: ConfigCipher | None = None,
    ) -> "SecretGatewayAdapter":
        adapter = cls(settings)
        adapter.attach(config, cipher)
        return adapter

    @property
    def attached(self) -> bool:
        return self.retriever is not None

    @property
    def attribute_prefix(self) -> str:
        return self.settings.retrieval.attribute_prefix

    def _default_cipher(self) -> ConfigCipher | None:
        passphrase = self.settings.cipher.passphrase
        if passphrase is None:
            return None
        return ConfigCipher.from_passphrase(
            passphrase.get_secret_value(), self.settings.cipher.salt
        )

    @staticmethod
    def _client_configuration(
        config: Mapping[str, Any] | None, fields: AdapterFields
    ) -> Mapping[str, Any] | str | None:
        section = config.get(CLIENT_CONFIGURATION) if config else None
        if isinstance(section, Mapping):
            return section
        return fields.client_configuration.literal or None

    def attach(
        self,
        config: Mapping[str, Any] | None,
        cipher: ConfigCipher | None = None,
    ) -> None:
        """Build the immutable configuration snapshot for this adapter.

        Args:
            config: Filter configuration keyed by field name
            cipher: Cipher for encrypted values; built from settings when omitted

        A failure here leaves the adapter unattached. Invocations then
        report that the client was not configured.
        """
        try:
            fields = AdapterFields.from_config(config)
            credentials = select_credential_source(
                CredentialInputs(
                    credential_type=fields.credential_type.literal,
                    credentials_file_path=fields.credentials_file_path.literal,
                    aws_profile=fields.aws_profile.literal,
                    aws_credential=fields.aws_credential.literal,
                    inline=self.settings.credentials.inline_credentials(),
                    default_profile=self.settings.credentials.default_profile,
                )
            )
            transport = build_transport_config(
                self._client_configuration(config, fields),
                cipher or self._default_cipher(),
            )
        except Exception as e:
            logger.error(
                "Failed to attach secret gateway adapter", error=str(e), exc_info=True
            )
            self.fields = None
            self.retriever = None
            return

        self.fields = fields
        # A token tripped by an earlier detach must not reach the new retriever
        self.cancellation = CancellationToken()
        self.retriever = SecretRetriever(
            RegionClientCache(credentials, transport), self.cancellation
        )
        logger.info(
            "Secret gateway adapter attached",
            fields=fields.describe(),
            credentials=credentials.description,
            transport=transport.describe(),
        )

    def detach(self) -> None:
        """Interrupt pending retry waits and drop cached clients."""
        self.cancellation.cancel()
        if self.retriever is not None:
            self.retriever.clients.clear()
        self.retriever = None
        self.fields = None
        logger.info("Secret gateway adapter detached")

    def build_request(self, message: Mapping[str, Any]) -> RetrievalRequest:
        """Resolve the per-message fields into a retrieval request."""
        fields = self.fields
        defaults = self.settings.retrieval
        return build_request(
            secret_id=fields.secret_name.substitute(message),
            region=fields.region.substitute(message),
            max_retries=fields.max_retries.substitute(message),
            retry_delay=fields.retry_delay.substitute(message),
            version_id=fields.version_id.substitute(message),
            version_stage=fields.version_stage.substitute(message),
            default_region=defaults.default_region,
            default_max_retries=defaults.default_max_retries,
            default_retry_delay_ms=defaults.default_retry_delay_ms,
        )

    @staticmethod
    def _not_configured() -> OutcomeRecord:
        logger.error(CLIENT_NOT_CONFIGURED)
        return OutcomeRecord.failure(
            RetrievalState.PERMANENT_FAILURE,
            ErrorCode.CONFIGURATION_ERROR,
            CLIENT_NOT_CONFIGURED,
        )

    @staticmethod
    def _unexpected(error: Exception) -> OutcomeRecord:
        logger.error(UNEXPECTED_ERROR, error=str(error), exc_info=True)
        return OutcomeRecord.failure(
            RetrievalState.PERMANENT_FAILURE,
            ErrorCode.UNEXPECTED_ERROR,
            UNEXPECTED_ERROR,
            500,
        )

    def _finish(self, outcome: OutcomeRecord, message: MutableMapping[str, Any]) -> bool:
        try:
            write_outcome(outcome, message, self.attribute_prefix)
        except Exception as e:
            logger.error("Could not write outcome attributes", error=str(e), exc_info=True)
            return False
        return outcome.succeeded

    def retrieve(self, message: Mapping[str, Any]) -> OutcomeRecord:
        """Run one retrieval and return the outcome without writing it."""
        if self.retriever is None or self.fields is None:
            return self._not_configured()
        try:
            return self.retriever.retrieve(self.build_request(message))
        except Exception as e:
            return self._unexpected(e)

    def invoke(self, message: MutableMapping[str, Any]) -> bool:
        """Retrieve the configured secret and write the outcome into ``message``.

        Returns True only when the secret was retrieved.
        """
        with InvocationContext():
            return self._finish(self.retrieve(message), message)

    async def aretrieve(self, message: Mapping[str, Any]) -> OutcomeRecord:
        if self.retriever is None or self.fields is None:
            return self._not_configured()
        try:
            return await self.retriever.aretrieve(self.build_request(message))
        except Exception as e:
            return self._unexpected(e)

    async def ainvoke(self, message: MutableMapping[str, Any]) -> bool:
        """Async variant of ``invoke``.

        A cancelled task still gets the interrupted outcome written into
        ``message`` before the cancellation propagates.
        """
        with InvocationContext():
            try:
                outcome = await self.aretrieve(message)
            except RetrievalCancelledError as e:
                self._finish(e.outcome, message)
                raise
            return self._finish(outcome, message)
