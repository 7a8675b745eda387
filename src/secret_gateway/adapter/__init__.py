"""Message-facing adapter for secret retrieval."""

from .fields import AdapterFields, Selector, lookup
from .processor import SecretGatewayAdapter

__all__ = ["AdapterFields", "SecretGatewayAdapter", "Selector", "lookup"]
