"""
Thread-safe in-memory map with per-entry expiry.
"""
import threading
import time
import logging
import weakref
from typing import Callable, Dict, Optional

from .core import CacheEntry

logger = logging.getLogger("ssm_cache.store")


class ExpiringStore:
    """
    Key -> CacheEntry map guarded by a reentrant lock.

    Expired entries are never returned by get(). They are reclaimed
    lazily when read, by delete_expired(), or by an optional janitor
    thread running delete_expired() every `cleanup_interval` seconds.
    There is no capacity bound.
    """

    def __init__(
        self,
        cleanup_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the store.

        Args:
            cleanup_interval: Seconds between background sweeps (None or <= 0 disables)
            clock: Monotonic time source, injectable for tests
        """
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._clock = clock

        self._janitor: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        if cleanup_interval is not None and cleanup_interval > 0:
            self._start_janitor(cleanup_interval)

    def now(self) -> float:
        """Current reading of the store's clock."""
        return self._clock()

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the live entry for key, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                logger.debug(f"Reclaimed expired entry on read: {key}")
                return None
            return entry

    def set(self, key: str, entry: CacheEntry) -> None:
        """Store an entry, replacing any existing one."""
        with self._lock:
            self._entries[key] = entry

    def delete(self, key: str) -> bool:
        """
        Remove an entry immediately, regardless of its TTL.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            return self._entries.pop(key, None) is not None

    def delete_expired(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"Swept {len(expired)} expired entries")
        return len(expired)

    def clear(self) -> int:
        """
        Remove all entries.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def __len__(self) -> int:
        # Counts entries not yet reclaimed, expired or not
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def _start_janitor(self, interval: float) -> None:
        # The thread only holds a weak reference, so dropping the store ends it
        self._janitor = threading.Thread(
            target=_run_janitor,
            args=(weakref.ref(self), self._stop_event, interval),
            name="ssm-cache-janitor",
            daemon=True,
        )
        self._janitor.start()
        weakref.finalize(self, self._stop_event.set)
        logger.debug(f"Started janitor (interval={interval}s)")

    @property
    def janitor_running(self) -> bool:
        return self._janitor is not None and self._janitor.is_alive()

    def close(self) -> None:
        """Stop the janitor thread, if any. Entries are kept."""
        if self._janitor is None:
            return
        self._stop_event.set()
        self._janitor.join()
        self._janitor = None


def _run_janitor(
    store_ref: "weakref.ReferenceType[ExpiringStore]",
    stop_event: threading.Event,
    interval: float,
) -> None:
    """Sweep expired entries until stopped or the store is collected."""
    while not stop_event.wait(interval):
        store = store_ref()
        if store is None:
            return
        store.delete_expired()
        del store
