"""Secret retrieval: client cache, retry engine and result normalization."""

from .classifier import classify_error, is_transient
from .client_cache import RegionClientCache
from .engine import (
    CancellationToken,
    SecretRetriever,
    build_request,
    parse_int_with_default,
    validate_request,
)
from .normalizer import (
    DEFAULT_ATTRIBUTE_PREFIX,
    normalize_secret,
    outcome_attributes,
    write_outcome,
)

__all__ = [
    "CancellationToken",
    "DEFAULT_ATTRIBUTE_PREFIX",
    "RegionClientCache",
    "SecretRetriever",
    "build_request",
    "classify_error",
    "is_transient",
    "normalize_secret",
    "outcome_attributes",
    "parse_int_with_default",
    "validate_request",
    "write_outcome",
]
