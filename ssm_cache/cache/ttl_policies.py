"""
TTL sentinels and expiry resolution.

TTLs are given in seconds (int or float) or as a timedelta. Two sentinel
values are recognised:

- DEFAULT_EXPIRATION (0): use the cache's configured default TTL
- NO_EXPIRATION (-1): the entry never expires
"""
from datetime import timedelta
from typing import Optional, Union

TTL = Union[int, float, timedelta]

DEFAULT_EXPIRATION: int = 0
NO_EXPIRATION: int = -1


def ttl_to_seconds(ttl: TTL) -> float:
    """
    Normalize a TTL to seconds.

    Args:
        ttl: Seconds or a timedelta

    Returns:
        TTL in seconds as a float

    Raises:
        TypeError: If ttl is neither a number nor a timedelta
    """
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    # bool is an int subclass but never a meaningful TTL
    if isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
        raise TypeError(f"TTL must be seconds or a timedelta, got {type(ttl).__name__}")
    return float(ttl)


def resolve_ttl(ttl: TTL, default_ttl: TTL) -> Optional[float]:
    """
    Resolve a requested TTL against the cache default.

    Args:
        ttl: Requested TTL, possibly DEFAULT_EXPIRATION or NO_EXPIRATION
        default_ttl: The cache's configured default TTL

    Returns:
        Lifetime in seconds, or None if the entry should never expire
    """
    seconds = ttl_to_seconds(ttl)
    if seconds == DEFAULT_EXPIRATION:
        seconds = ttl_to_seconds(default_ttl)
    # A zero or negative default means "never expire"
    if seconds <= 0:
        return None
    return seconds

