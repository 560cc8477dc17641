"""
Base Cache Module

This module defines the core interface for the caching system: the cache
backend contract shared by every eviction strategy and the null cache, and
the enum naming the available policies.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Generic, Iterator, Optional, TypeVar

# Type variables for generic cache key and value types
K = TypeVar('K')
V = TypeVar('V')


class CachePolicy(str, Enum):
    """Cache eviction and management policies."""

    # Nothing is stored
    NONE = "none"

    # Time-to-live based eviction only
    TTL = "ttl"

    # Least Recently Used eviction
    LRU = "lru"

    # Least Frequently Used eviction
    LFU = "lfu"

    # First In, First Out eviction
    FIFO = "fifo"


class CacheBackend(Generic[K, V], ABC):
    """
    Abstract interface for in-process caches.

    Every implementation is safe for concurrent use from multiple threads.
    Missing and expired keys are reported through return values, never by
    raising.
    """

    policy: CachePolicy = CachePolicy.NONE

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the name of this cache."""
        pass

    @property
    @abstractmethod
    def capacity(self) -> int:
        """Maximum number of entries, or 0 if the cache is unbounded."""
        pass

    @property
    @abstractmethod
    def default_ttl(self) -> float:
        """Default time-to-live in seconds, or 0 if entries do not expire by default."""
        pass

    @abstractmethod
    def put(self, key: K, value: V, ttl: Optional[float] = None) -> None:
        """
        Store a value in the cache.

        If the cache is full, prune() runs first to make room.

        Args:
            key: The cache key
            value: The value to cache
            ttl: Time-to-live in seconds; None uses the default TTL, 0 never expires
        """
        pass

    @abstractmethod
    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """
        Retrieve a value from the cache.

        Args:
            key: The cache key
            default: Value returned when the key is missing or expired

        Returns:
            The cached value, or default
        """
        pass

    @abstractmethod
    def remove(self, key: K) -> None:
        """Remove a key from the cache. Missing keys are ignored."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove every entry. Hit and miss counters are kept."""
        pass

    @abstractmethod
    def size(self) -> int:
        """Current number of entries, including expired ones not yet pruned."""
        pass

    @abstractmethod
    def is_full(self) -> bool:
        """Whether the cache has reached its capacity."""
        pass

    @abstractmethod
    def prune(self) -> int:
        """
        Remove expired and evictable entries.

        Returns:
            Number of removed entries
        """
        pass

    @abstractmethod
    def iterate(self) -> Iterator[V]:
        """Return an iterator over the non-expired values."""
        pass

    @property
    @abstractmethod
    def hit_count(self) -> int:
        """Number of successful get() calls."""
        pass

    @property
    @abstractmethod
    def miss_count(self) -> int:
        """Number of get() calls that found nothing."""
        pass

    def is_empty(self) -> bool:
        """Whether the cache holds no entries."""
        return self.size() == 0

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the cache.

        Returns:
            Dictionary containing cache statistics
        """
        hits = self.hit_count
        misses = self.miss_count
        total = hits + misses
        return {
            'name': self.name,
            'policy': self.policy.value,
            'size': self.size(),
            'capacity': self.capacity,
            'default_ttl': self.default_ttl,
            'hits': hits,
            'misses': misses,
            'hit_rate': hits / total if total > 0 else 0
        }

    def __len__(self) -> int:
        return self.size()

    def __iter__(self) -> Iterator[V]:
        return self.iterate()
