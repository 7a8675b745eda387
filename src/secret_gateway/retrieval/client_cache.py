"""Region-keyed cache of Secrets Manager clients."""

import threading
from typing import Any

from ..credentials.providers import CredentialSource
from ..observability.logging import get_logger
from ..transport.client_config import TransportConfig

logger = get_logger(__name__)

SERVICE_NAME = "secretsmanager"


class RegionClientCache:
    """Build one client per region from an immutable configuration snapshot.

    Clients are created lazily on first use of a region and shared by all
    later invocations. boto3 clients are safe to call from several threads.
    """

    def __init__(self, credentials: CredentialSource, transport: TransportConfig):
        self.credentials = credentials
        self.transport = transport
        self._clients: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, region: str) -> Any:
        """Return the client bound to ``region``, creating it if needed."""
        client = self._clients.get(region)
        if client is not None:
            return client

        with self._lock:
            if region not in self._clients:
                self._clients[region] = self._create(region)
                logger.info(
                    "Created Secrets Manager client",
                    region=region,
                    credentials=self.credentials.description,
                )
            return self._clients[region]

    def _create(self, region: str) -> Any:
        session = self.credentials.create_session()
        return session.client(
            SERVICE_NAME,
            region_name=region,
            config=self.transport.to_botocore_config(),
            use_ssl=self.transport.use_ssl,
        )

    @property
    def regions(self) -> list[str]:
        return list(self._clients)

    def clear(self) -> None:
        with self._lock:
            self._clients.clear()

    def __len__(self) -> int:
        return len(self._clients)
