"""Transport configuration for the Secrets Manager client.

``build_transport_config`` reads a loosely typed client configuration section
and produces a frozen ``TransportConfig``. Absent fields keep their defaults,
malformed fields are logged and skipped, and the builder itself never raises.
"""

import json
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any
from urllib.parse import quote

from botocore.config import Config
from pydantic import BaseModel, ConfigDict, SecretStr

from ..domain.exceptions import DecryptionError
from ..observability.logging import get_logger
from .cipher import ConfigCipher

logger = get_logger(__name__)

DEFAULT_CONNECTION_TIMEOUT_MS = 5000

# "proxy:3128" or "[::1]:3128", but not a bare IPv6 address
_HOST_WITH_PORT = re.compile(r"(^[^:]*|\]):\d+$")


class Protocol(str, Enum):
    """Wire protocol for the secret store endpoint."""

    HTTP = "HTTP"
    HTTPS = "HTTPS"


class ProxyConfig(BaseModel):
    """Outbound proxy settings."""

    model_config = ConfigDict(frozen=True)

    host: str | None = None
    port: int | None = None
    username: str | None = None
    password: SecretStr | None = None
    domain: str | None = None
    workstation: str | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.host)

    def url(self) -> str | None:
        """Proxy URL including credentials, or None when no host is set."""
        if not self.host:
            return None

        host = self.host
        scheme = "http"
        if "://" in host:
            scheme, host = host.split("://", 1)

        auth = ""
        if self.username:
            auth = quote(self.username, safe="")
            if self.password is not None:
                auth += ":" + quote(self.password.get_secret_value(), safe="")
            auth += "@"

        host = host.rstrip("/")
        port = ""
        if self.port and not _HOST_WITH_PORT.search(host):
            port = f":{self.port}"
        return f"{scheme}://{auth}{host}{port}"


class SocketBufferHints(BaseModel):
    """Socket send and receive buffer sizes in bytes."""

    model_config = ConfigDict(frozen=True)

    send: int
    receive: int


class TransportConfig(BaseModel):
    """Immutable transport settings shared by every client of one adapter."""

    model_config = ConfigDict(frozen=True)

    connection_timeout_ms: int = DEFAULT_CONNECTION_TIMEOUT_MS
    socket_timeout_ms: int | None = None
    max_connections: int | None = None
    max_error_retry: int | None = None
    protocol: Protocol = Protocol.HTTPS
    user_agent: str | None = None
    proxy: ProxyConfig = ProxyConfig()
    socket_buffer_hints: SocketBufferHints | None = None

    @property
    def use_ssl(self) -> bool:
        return self.protocol == Protocol.HTTPS

    def to_botocore_config(self, region: str | None = None) -> Config:
        """Translate into a botocore client ``Config``."""
        options: dict[str, Any] = {
            "connect_timeout": self.connection_timeout_ms / 1000.0,
        }
        if region:
            options["region_name"] = region
        if self.socket_timeout_ms is not None:
            options["read_timeout"] = self.socket_timeout_ms / 1000.0
        if self.max_connections is not None:
            options["max_pool_connections"] = self.max_connections
        if self.max_error_retry is not None:
            # botocore counts the initial request in total_max_attempts
            options["retries"] = {
                "total_max_attempts": self.max_error_retry + 1,
                "mode": "standard",
            }
        if self.user_agent:
            options["user_agent"] = self.user_agent

        proxy_url = self.proxy.url()
        if proxy_url:
            options["proxies"] = {"http": proxy_url, "https": proxy_url}

        # botocore exposes no socket buffer options; the hints stay on the
        # config for describe() only
        return Config(**options)

    def describe(self) -> dict[str, Any]:
        """Summary for logs. The proxy password is never included."""
        return {
            "connection_timeout_ms": self.connection_timeout_ms,
            "socket_timeout_ms": self.socket_timeout_ms,
            "max_connections": self.max_connections,
            "max_error_retry": self.max_error_retry,
            "protocol": self.protocol.value,
            "user_agent": self.user_agent,
            "proxy_host": self.proxy.host,
            "proxy_port": self.proxy.port,
            "proxy_authenticated": self.proxy.password is not None,
            "socket_buffer_hints": (
                self.socket_buffer_hints.model_dump()
                if self.socket_buffer_hints
                else None
            ),
        }


def _load_section(source: Mapping[str, Any] | str | None) -> Mapping[str, Any] | None:
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source
    if isinstance(source, str):
        if not source.strip():
            return None
        try:
            parsed = json.loads(source)
        except json.JSONDecodeError as e:
            logger.warning("Malformed inline client configuration", error=str(e))
            return None
        if not isinstance(parsed, dict):
            logger.warning(
                "Inline client configuration is not an object",
                value_type=type(parsed).__name__,
            )
            return None
        return parsed
    logger.warning(
        "Unsupported client configuration type", value_type=type(source).__name__
    )
    return None


def _int_field(section: Mapping[str, Any], name: str) -> int | None:
    value = section.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        logger.warning("Invalid integer value", field=name, value=value)
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        logger.warning("Invalid integer value", field=name, value=value)
        return None
    if number < 0:
        logger.warning("Negative value ignored", field=name, value=number)
        return None
    return number


def _str_field(section: Mapping[str, Any], name: str) -> str | None:
    value = section.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        logger.warning(
            "Invalid string value", field=name, value_type=type(value).__name__
        )
        return None
    value = value.strip()
    return value or None


def _protocol_field(section: Mapping[str, Any]) -> Protocol | None:
    value = _str_field(section, "protocol")
    if value is None:
        return None
    try:
        return Protocol(value.upper())
    except ValueError:
        logger.error("Invalid protocol value", value=value)
        return None


def _buffer_hints(section: Mapping[str, Any]) -> SocketBufferHints | None:
    send = _int_field(section, "socketSendBufferSizeHint")
    receive = _int_field(section, "socketReceiveBufferSizeHint")
    if send is None or receive is None:
        if send is not None or receive is not None:
            logger.debug("Socket buffer hints need both send and receive sizes")
        return None
    return SocketBufferHints(send=send, receive=receive)


def _proxy_password(
    section: Mapping[str, Any], cipher: ConfigCipher | None
) -> tuple[SecretStr | None, bool]:
    """Return (password, failed). ``failed`` is set when a value was present
    but could not be decrypted."""
    token = section.get("proxyPassword")
    if token is None or (isinstance(token, str) and not token.strip()):
        return None, False
    if cipher is None:
        logger.error("Cannot decrypt proxyPassword: no configuration cipher set")
        return None, True
    try:
        return SecretStr(cipher.decrypt(token, "proxyPassword")), False
    except DecryptionError as e:
        logger.error("Error decrypting proxyPassword", error=str(e))
        return None, True


def _build(section: Mapping[str, Any], cipher: ConfigCipher | None) -> TransportConfig:
    values: dict[str, Any] = {}

    for field, key in (
        ("connection_timeout_ms", "connectionTimeout"),
        ("socket_timeout_ms", "socketTimeout"),
        ("max_connections", "maxConnections"),
        ("max_error_retry", "maxErrorRetry"),
    ):
        number = _int_field(section, key)
        if number is not None:
            values[field] = number

    protocol = _protocol_field(section)
    if protocol is not None:
        values["protocol"] = protocol

    user_agent = _str_field(section, "userAgent")
    if user_agent is not None:
        values["user_agent"] = user_agent

    hints = _buffer_hints(section)
    if hints is not None:
        logger.debug("Socket buffer hints are carried but not applied")
        values["socket_buffer_hints"] = hints

    password, password_failed = _proxy_password(section, cipher)
    username = _str_field(section, "proxyUsername")
    if password_failed and username:
        logger.warning(
            "Proxy username dropped because its password is unavailable",
            proxy_username=username,
        )
        username = None

    domain = _str_field(section, "proxyDomain")
    workstation = _str_field(section, "proxyWorkstation")
    if domain or workstation:
        logger.debug("NTLM proxy domain and workstation are carried but not applied")

    values["proxy"] = ProxyConfig(
        host=_str_field(section, "proxyHost"),
        port=_int_field(section, "proxyPort"),
        username=username,
        password=password,
        domain=domain,
        workstation=workstation,
    )
    return TransportConfig(**values)


def build_transport_config(
    source: Mapping[str, Any] | str | None,
    cipher: ConfigCipher | None = None,
) -> TransportConfig:
    """Build the transport configuration. Never raises."""
    try:
        section = _load_section(source)
        if section is None:
            logger.debug("Using default client configuration")
            return TransportConfig()
        return _build(section, cipher)
    except Exception as e:
        logger.error(
            "Client configuration could not be built, using defaults", error=str(e)
        )
        return TransportConfig()
