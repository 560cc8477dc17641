"""
Cache Entry Module

This module provides the CacheEntry class, which encapsulates a cached value
with the metadata used for expiration and eviction decisions.
"""

import time
from typing import Callable, Generic, Optional, TypeVar

K = TypeVar('K')
V = TypeVar('V')


class CacheEntry(Generic[K, V]):
    """
    Represents a cached value with metadata.

    The time-to-live is measured from the last access, so every successful
    read pushes expiry further out. Entries are owned by a single cache; only
    their values are handed to callers.

    Attributes:
        key: The cache key
        value: The cached value
        ttl: Time-to-live in seconds, 0 for no expiration
        created_at: When the entry was created (cache clock)
        last_access: When the entry was last read, or created
        access_count: Number of reads since creation
    """

    __slots__ = ('key', 'value', 'ttl', 'created_at', 'last_access', 'access_count', '_clock')

    def __init__(
        self,
        key: K,
        value: V,
        ttl: float = 0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize a cache entry.

        Args:
            key: The cache key
            value: The value to cache
            ttl: Time-to-live in seconds, 0 for no expiration
            clock: Time source shared with the owning cache
        """
        self.key = key
        self.value = value
        self.ttl = ttl
        self._clock = clock
        self.created_at = clock()
        self.last_access = self.created_at
        self.access_count = 0

    def is_expired(self, now: Optional[float] = None) -> bool:
        """
        Check if the entry has expired.

        Args:
            now: Current time; read from the clock when omitted

        Returns:
            True if the entry has expired, False otherwise
        """
        if self.ttl == 0:
            return False
        if now is None:
            now = self._clock()
        return now >= self.last_access + self.ttl

    def access(self) -> V:
        """
        Record a read of this entry and return its value.

        Updates the access count and last access time.
        """
        self.last_access = self._clock()
        self.access_count += 1
        return self.value

    def remaining_ttl(self) -> Optional[float]:
        """
        Get the remaining TTL in seconds.

        Returns:
            Remaining TTL in seconds, or None if the entry never expires
        """
        if self.ttl == 0:
            return None
        remaining = self.last_access + self.ttl - self._clock()
        return max(0.0, remaining)

    def __repr__(self) -> str:
        return (
            f"CacheEntry(key={self.key!r}, ttl={self.ttl}, "
            f"access_count={self.access_count})"
        )
