"""
Core cache data structures.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Union
from enum import Enum


# Flattened result of a recursive subtree fetch: full SSM name -> value
ParameterGroup = Dict[str, str]


class ValueKind(Enum):
    """Shape of a cached value."""
    SCALAR = "scalar"   # String, SecureString, or raw comma-joined StringList
    GROUP = "group"     # ParameterGroup mapping


@dataclass(frozen=True)
class CacheEntry:
    """
    A cached value tagged with its kind and absolute expiry.

    expires_at is a reading of the store's clock, or None for entries
    that never expire.
    """
    kind: ValueKind
    value: Union[str, ParameterGroup]
    expires_at: Optional[float] = None

    @classmethod
    def scalar(cls, value: str, expires_at: Optional[float] = None) -> "CacheEntry":
        return cls(kind=ValueKind.SCALAR, value=value, expires_at=expires_at)

    @classmethod
    def group(cls, value: ParameterGroup, expires_at: Optional[float] = None) -> "CacheEntry":
        return cls(kind=ValueKind.GROUP, value=value, expires_at=expires_at)

    def is_expired(self, now: float) -> bool:
        """Check if the entry's TTL has elapsed at time `now`."""
        return self.expires_at is not None and now >= self.expires_at

    def remaining_seconds(self, now: float) -> Optional[float]:
        """Seconds of life left, or None if the entry never expires."""
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - now)
