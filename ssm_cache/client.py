"""
Auto-expiring cache populated from SSM Parameter Store.
"""
import threading
import logging
from typing import Any, Callable, Dict, List, Optional
import time

import boto3

from config.settings import Settings, get_settings

from .cache import (
    DEFAULT_EXPIRATION,
    TTL,
    CacheEntry,
    ExpiringStore,
    ParameterGroup,
    ValueKind,
    resolve_ttl,
)
from .errors import CacheTypeAssertionError, RemoteFetchError, TypeMismatchError
from .source import ParameterSource, ParameterType, get_parameter_source

logger = logging.getLogger("ssm_cache.client")

LIST_DELIMITER = ","


class ParameterCache:
    """
    Expiring cache in front of a ParameterSource.

    - Cache hits never touch the remote store and never refresh the TTL
    - Misses fetch, check the declared type, then store under the
      parameter name (or the caller's group key)
    - Failures are raised to the caller and never cached
    - No lock is held across remote calls; concurrent misses on the
      same key may both fetch, and the last store wins
    """

    def __init__(
        self,
        source: ParameterSource,
        default_ttl: TTL,
        cleanup_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            source: Remote parameter store to fetch from on a miss
            default_ttl: TTL used by the non-expiring accessors and by
                DEFAULT_EXPIRATION. Zero or negative means never expire.
            cleanup_interval: Seconds between background sweeps of expired
                entries; None leaves reclamation to reads
            clock: Monotonic time source, injectable for tests
        """
        # Fail on a malformed default before any entry is cached
        resolve_ttl(DEFAULT_EXPIRATION, default_ttl)
        self._source = source
        self._default_ttl = default_ttl
        self._store = ExpiringStore(cleanup_interval=cleanup_interval, clock=clock)

        self._stats_lock = threading.Lock()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "remote_fetches": 0,
        }

    @property
    def default_ttl(self) -> TTL:
        return self._default_ttl

    # ------------------------------------------------------------------
    # Scalar accessors
    # ------------------------------------------------------------------

    def get_string(self, name: str) -> str:
        """Return a String parameter, caching it with the default TTL."""
        return self.get_expiring_string(name, DEFAULT_EXPIRATION)

    def get_expiring_string(self, name: str, ttl: TTL) -> str:
        """Return a String parameter, caching it with a custom TTL."""
        cached = self._get_cached_scalar(name)
        if cached is not None:
            return cached
        return self._fetch_scalar(name, ParameterType.STRING, False, ttl)

    def get_string_list(self, name: str) -> List[str]:
        """Return a StringList parameter, caching it with the default TTL."""
        return self.get_expiring_string_list(name, DEFAULT_EXPIRATION)

    def get_expiring_string_list(self, name: str, ttl: TTL) -> List[str]:
        """
        Return a StringList parameter split on commas.

        Only the raw comma-joined string is cached. An empty value
        yields [""], matching str.split semantics.
        """
        cached = self._get_cached_scalar(name)
        if cached is None:
            cached = self._fetch_scalar(name, ParameterType.STRING_LIST, False, ttl)
        return cached.split(LIST_DELIMITER)

    def get_secure_string(self, name: str) -> str:
        """Return a decrypted SecureString parameter, caching it with the default TTL."""
        return self.get_expiring_secure_string(name, DEFAULT_EXPIRATION)

    def get_expiring_secure_string(self, name: str, ttl: TTL) -> str:
        """Return a decrypted SecureString parameter, caching the plaintext with a custom TTL."""
        cached = self._get_cached_scalar(name)
        if cached is not None:
            return cached
        return self._fetch_scalar(name, ParameterType.SECURE_STRING, True, ttl)

    # ------------------------------------------------------------------
    # Parameter groups
    # ------------------------------------------------------------------

    def get_parameter_group(
        self,
        group_key: str,
        path: str,
        with_decryption: bool = False,
    ) -> ParameterGroup:
        """
        Return every parameter under `path`, keyed by full SSM name.

        The fetch is recursive and the map is cached under `group_key`
        with the default TTL.
        """
        return self.get_expiring_parameter_group(
            group_key, path, DEFAULT_EXPIRATION, with_decryption=with_decryption
        )

    def get_expiring_parameter_group(
        self,
        group_key: str,
        path: str,
        ttl: TTL,
        with_decryption: bool = False,
    ) -> ParameterGroup:
        """
        Return every parameter under `path`, cached under `group_key` with a custom TTL.

        The group key is independent of the path: it is never derived from
        it, and nothing checks whether two keys cover overlapping subtrees.
        A failure on any page discards the pages already read.

        SecureString values are cached as returned by the store: ciphertext
        by default, plaintext when `with_decryption` is set. Decryption needs
        kms:Decrypt on every SecureString in the subtree.
        """
        entry = self._store.get(group_key)
        if entry is not None:
            if entry.kind is not ValueKind.GROUP:
                raise CacheTypeAssertionError(group_key, ValueKind.GROUP.value, entry.kind.value)
            self._record("hits")
            logger.debug(f"CACHE HIT (group): {group_key} [{self._describe_ttl(entry)}]")
            return dict(entry.value)

        lifetime = resolve_ttl(ttl, self._default_ttl)
        self._record("misses")
        logger.info(f"CACHE MISS (group): {group_key} <- {path}")

        group: ParameterGroup = {}
        try:
            for page in self._source.iter_parameters_by_path(
                path, recursive=True, with_decryption=with_decryption
            ):
                self._record("remote_fetches")
                for parameter in page:
                    group[parameter.name] = parameter.value_or_empty
        except Exception as e:
            raise RemoteFetchError.for_path(path, e) from e

        self._store.set(group_key, CacheEntry.group(group, self._expires_at(lifetime)))
        logger.info(f"Cached group {group_key} ({len(group)} parameters)")
        return dict(group)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def purge(self, key: str) -> "ParameterCache":
        """
        Remove the entry under `key` immediately.

        Works for parameter names and group keys alike; a missing key is
        not an error. Returns self so purges can be chained.
        """
        if self._store.delete(key):
            logger.info(f"Purged cache entry: {key}")
        return self

    def clear(self) -> int:
        """
        Remove all cached entries.

        Returns:
            Number of entries cleared
        """
        count = self._store.clear()
        logger.info(f"Cleared {count} cache entries")
        return count

    def delete_expired(self) -> int:
        """Reclaim expired entries now. Returns the number removed."""
        return self._store.delete_expired()

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        with self._stats_lock:
            stats = dict(self._stats)
        total_requests = stats["hits"] + stats["misses"]
        hit_rate = (stats["hits"] / total_requests * 100) if total_requests > 0 else 0

        return {
            "entries": len(self._store),
            "hits": stats["hits"],
            "misses": stats["misses"],
            "remote_fetches": stats["remote_fetches"],
            "hit_rate_percent": round(hit_rate, 1),
        }

    def close(self) -> None:
        """Stop background cleanup. The cache remains usable."""
        self._store.close()

    def __enter__(self) -> "ParameterCache":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_cached_scalar(self, name: str) -> Optional[str]:
        """Return the cached scalar for name, None on a miss."""
        entry = self._store.get(name)
        if entry is None:
            return None
        if entry.kind is not ValueKind.SCALAR:
            raise CacheTypeAssertionError(name, ValueKind.SCALAR.value, entry.kind.value)
        self._record("hits")
        logger.debug(f"CACHE HIT: {name} [{self._describe_ttl(entry)}]")
        return entry.value

    def _fetch_scalar(
        self,
        name: str,
        expected_type: ParameterType,
        with_decryption: bool,
        ttl: TTL,
    ) -> str:
        """Fetch a single parameter, verify its declared type, and cache it."""
        lifetime = resolve_ttl(ttl, self._default_ttl)
        self._record("misses")
        logger.info(f"CACHE MISS: {name}")

        try:
            parameter = self._source.fetch_parameter(name, with_decryption=with_decryption)
        except Exception as e:
            raise RemoteFetchError.for_parameter(name, e) from e
        finally:
            self._record("remote_fetches")

        if parameter.type != expected_type.value:
            raise TypeMismatchError(name, parameter.type, expected_type.value)

        value = parameter.value_or_empty
        self._store.set(name, CacheEntry.scalar(value, self._expires_at(lifetime)))
        return value

    def _expires_at(self, lifetime: Optional[float]) -> Optional[float]:
        # Expiry counts from the store, not from when the fetch started
        if lifetime is None:
            return None
        return self._store.now() + lifetime

    def _describe_ttl(self, entry: CacheEntry) -> str:
        remaining = entry.remaining_seconds(self._store.now())
        if remaining is None:
            return "no expiry"
        return f"ttl_left={remaining:.1f}s"

    def _record(self, stat: str) -> None:
        with self._stats_lock:
            self._stats[stat] += 1


def create_parameter_cache(
    settings: Optional[Settings] = None,
    session: Optional[boto3.session.Session] = None,
) -> ParameterCache:
    """
    Build a ParameterCache over SSM from settings.

    Args:
        settings: Configuration; read from the environment if omitted
        session: boto3 session carrying the caller's credentials

    Returns:
        A new, empty ParameterCache. Callers own it; nothing is global.
    """
    settings = settings or get_settings()
    source = get_parameter_source(settings, session=session)
    return ParameterCache(
        source=source,
        default_ttl=settings.default_ttl_seconds,
        cleanup_interval=settings.cleanup_interval_seconds,
    )
