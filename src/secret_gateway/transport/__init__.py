"""Transport configuration for the secret store client."""

from .cipher import ConfigCipher
from .client_config import (
    Protocol,
    ProxyConfig,
    SocketBufferHints,
    TransportConfig,
    build_transport_config,
)

__all__ = [
    "ConfigCipher",
    "Protocol",
    "ProxyConfig",
    "SocketBufferHints",
    "TransportConfig",
    "build_transport_config",
]
