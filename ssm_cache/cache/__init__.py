"""
Expiring in-memory storage for cached parameters.
"""
from .core import CacheEntry, ParameterGroup, ValueKind
from .ttl_policies import (
    TTL,
    DEFAULT_EXPIRATION,
    NO_EXPIRATION,
    resolve_ttl,
    ttl_to_seconds,
)
from .store import ExpiringStore

__all__ = [
    # Core types
    "CacheEntry",
    "ParameterGroup",
    "ValueKind",
    # TTL policies
    "TTL",
    "DEFAULT_EXPIRATION",
    "NO_EXPIRATION",
    "resolve_ttl",
    "ttl_to_seconds",
    # Store
    "ExpiringStore",
]
