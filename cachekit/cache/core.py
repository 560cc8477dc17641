"""
Cache Engine Module

This module implements AbstractCacheMap, the engine shared by every eviction
strategy. It owns the key to entry mapping, the capacity limit, the default
TTL, the hit/miss counters and the reader/writer lock guarding the map.
Strategies only decide what to evict, by implementing _prune_cache().

Locking:
- get() takes the shared lock. Entry metadata and the counters are updated
  under a separate stats lock so concurrent readers never race on them.
  An expired entry found by get() is removed after upgrading to the
  exclusive lock.
- Strategies whose reads reorder the map set exclusive_reads and take the
  exclusive lock for the whole get().
- Every mutating operation takes the exclusive lock. _prune_cache() and the
  hooks always run with the exclusive lock held.
"""

import threading
import time
from abc import abstractmethod
from typing import Any, Callable, Dict, Optional, TypeVar

from cachekit.cache.base import CacheBackend
from cachekit.cache.entry import CacheEntry
from cachekit.cache.iterator import CacheValuesIterator
from cachekit.common.locks import ReadWriteLock
from cachekit.common.logger import get_logger

logger = get_logger(__name__)

K = TypeVar('K')
V = TypeVar('V')

RemovalListener = Callable[[Any, Any], None]


class AbstractCacheMap(CacheBackend[K, V]):
    """
    Base class for map-backed caches.

    Features:
    - Thread-safe operations under a shared/exclusive lock
    - Per-entry TTL measured from last access, with a cache-wide default
    - Pruning before insertion when the cache is full
    - Removal notifications through on_remove()
    - Hit/miss statistics
    """

    # Whether get() must hold the exclusive lock
    exclusive_reads = False

    def __init__(
        self,
        capacity: int = 0,
        default_ttl: float = 0,
        name: Optional[str] = None,
        removal_listener: Optional[RemovalListener] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the cache.

        Args:
            capacity: Maximum number of entries, 0 for unbounded
            default_ttl: Default time-to-live in seconds, 0 for no expiration
            name: Name of this cache (defaults to the policy name)
            removal_listener: Called with (key, value) for every removed entry
            clock: Time source in seconds
        """
        if capacity < 0:
            raise ValueError(f"capacity must not be negative, got {capacity}")
        if default_ttl < 0:
            raise ValueError(f"default_ttl must not be negative, got {default_ttl}")

        self._capacity = int(capacity)
        self._default_ttl = default_ttl
        self._name = name or self.policy.value
        self._removal_listener = removal_listener
        self._clock = clock
        self._cache_map: Dict[K, CacheEntry[K, V]] = self._create_map()
        self._lock = ReadWriteLock()
        self._stats_lock = threading.Lock()

        # Set once any put() supplies a TTL; enables expiry sweeps
        self._custom_ttl_used = False

        # Statistics
        self._hits = 0
        self._misses = 0

    def _create_map(self) -> Dict[K, CacheEntry[K, V]]:
        """Create the backing map. Ordered strategies override this."""
        return {}

    @property
    def name(self) -> str:
        """Get the name of this cache."""
        return self._name

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    @property
    def custom_ttl_used(self) -> bool:
        """Whether any put() has ever supplied a non-zero TTL."""
        return self._custom_ttl_used

    @property
    def hit_count(self) -> int:
        return self._hits

    @property
    def miss_count(self) -> int:
        return self._misses

    def is_prune_expired_active(self) -> bool:
        """Whether entries can expire at all, so an expiry sweep may find something."""
        return self._default_ttl != 0 or self._custom_ttl_used

    def put(self, key: K, value: V, ttl: Optional[float] = None) -> None:
        """
        Store a value, pruning first if the cache is full.

        An existing entry for the key is replaced by a fresh one, which resets
        its access statistics and moves it to the back of ordered maps.

        Args:
            key: The cache key
            value: The value to cache
            ttl: Time-to-live in seconds; None uses the default TTL, 0 never expires
        """
        if ttl is None:
            ttl = self._default_ttl
        elif ttl < 0:
            raise ValueError(f"ttl must not be negative, got {ttl}")

        with self._lock.write_locked():
            entry = CacheEntry(key, value, ttl, self._clock)
            if ttl != 0:
                self._custom_ttl_used = True
            self._on_add(key, value)
            if self.is_full():
                pruned = self._prune_cache()
                if pruned:
                    logger.debug(f"Cache '{self._name}' pruned {pruned} entries to make room")
            self._delete_locked(key)
            self._cache_map[key] = entry
            self._after_insert(key)

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """
        Retrieve a value from the cache.

        Expired entries are removed when found.

        Args:
            key: The cache key
            default: Value returned on a miss

        Returns:
            The cached value, or default
        """
        if self.exclusive_reads:
            with self._lock.write_locked():
                entry = self._cache_map.get(key)
                if entry is not None and entry.is_expired():
                    self._delete_locked(key)
                    entry = None
                if entry is None:
                    self._record_miss()
                    return default
                self._on_access(key)
                return self._record_hit(entry)

        with self._lock.read_locked():
            entry = self._cache_map.get(key)
            if entry is not None and not entry.is_expired():
                return self._record_hit(entry)

        if entry is not None:
            self._remove_if_expired(key, entry)
        self._record_miss()
        return default

    def remove(self, key: K) -> None:
        """Remove a key from the cache. Missing keys are ignored."""
        with self._lock.write_locked():
            self._delete_locked(key)

    def clear(self) -> None:
        """Remove every entry. Hit and miss counters are kept."""
        with self._lock.write_locked():
            entries = list(self._cache_map.values())
            self._cache_map.clear()
            for entry in entries:
                self.on_remove(entry.key, entry.value)

    def size(self) -> int:
        return len(self._cache_map)

    def is_full(self) -> bool:
        if self._capacity == 0:
            return False
        return len(self._cache_map) >= self._capacity

    def prune(self) -> int:
        """
        Run the strategy's prune algorithm.

        Returns:
            Number of removed entries
        """
        with self._lock.write_locked():
            count = self._prune_cache()
        if count:
            logger.debug(f"Cache '{self._name}' pruned {count} entries")
        return count

    def iterate(self) -> CacheValuesIterator[V]:
        """
        Return an iterator over the values of non-expired entries.

        Expired entries are skipped, not removed. The iterator's remove()
        deletes the value it returned last.
        """
        with self._lock.read_locked():
            snapshot = list(self._cache_map.values())
        return CacheValuesIterator(snapshot, self._holds, self._remove_entry)

    def on_remove(self, key: K, value: V) -> None:
        """
        Called for every entry that leaves the cache.

        By default forwards to the removal listener, if one was given.
        """
        if self._removal_listener is not None:
            self._removal_listener(key, value)

    @abstractmethod
    def _prune_cache(self) -> int:
        """
        Prune implementation, called with the exclusive lock held.

        Returns:
            Number of removed entries
        """
        pass

    # Hooks, all called with the exclusive lock held

    def _on_add(self, key: K, value: V) -> None:
        """Called by put() before the full check."""

    def _after_insert(self, key: K) -> None:
        """Called by put() after the new entry is in the map."""

    def _on_access(self, key: K) -> None:
        """Called on a hit when exclusive_reads is set."""

    # Helpers for strategies

    def _delete_locked(self, key: K) -> Optional[CacheEntry[K, V]]:
        """Remove a key and notify on_remove(). Requires the exclusive lock."""
        entry = self._cache_map.pop(key, None)
        if entry is not None:
            self.on_remove(entry.key, entry.value)
        return entry

    def _prune_expired(self) -> int:
        """Remove every expired entry. Requires the exclusive lock."""
        now = self._clock()
        expired = [key for key, entry in self._cache_map.items() if entry.is_expired(now)]
        for key in expired:
            self._delete_locked(key)
        return len(expired)

    def _record_hit(self, entry: CacheEntry[K, V]) -> V:
        with self._stats_lock:
            self._hits += 1
            return entry.access()

    def _record_miss(self) -> None:
        with self._stats_lock:
            self._misses += 1

    def _remove_if_expired(self, key: K, entry: CacheEntry[K, V]) -> None:
        with self._lock.write_locked():
            if self._cache_map.get(key) is entry and entry.is_expired():
                self._delete_locked(key)

    def _holds(self, entry: CacheEntry[K, V]) -> bool:
        return self._cache_map.get(entry.key) is entry

    def _remove_entry(self, entry: CacheEntry[K, V]) -> None:
        with self._lock.write_locked():
            if self._cache_map.get(entry.key) is entry:
                self._delete_locked(entry.key)
