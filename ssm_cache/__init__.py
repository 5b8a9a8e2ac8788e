"""
Auto-expiring in-process cache for AWS SSM Parameter Store.
"""
from .cache import DEFAULT_EXPIRATION, NO_EXPIRATION, ParameterGroup
from .client import ParameterCache, create_parameter_cache
from .errors import (
    CacheTypeAssertionError,
    ParameterCacheError,
    RemoteFetchError,
    TypeMismatchError,
)
from .source import (
    Boto3ParameterSource,
    InMemoryParameterSource,
    ParameterSource,
    ParameterType,
    RemoteParameter,
)

__all__ = [
    # Cache
    "ParameterCache",
    "create_parameter_cache",
    "ParameterGroup",
    "DEFAULT_EXPIRATION",
    "NO_EXPIRATION",
    # Errors
    "ParameterCacheError",
    "RemoteFetchError",
    "TypeMismatchError",
    "CacheTypeAssertionError",
    # Sources
    "ParameterSource",
    "ParameterType",
    "RemoteParameter",
    "Boto3ParameterSource",
    "InMemoryParameterSource",
]
