"""
Null Cache Module

A cache that stores nothing, for turning caching off without changing the
code that uses it.
"""

from typing import Optional, TypeVar

from cachekit.cache.base import CacheBackend, CachePolicy
from cachekit.cache.iterator import CacheValuesIterator

K = TypeVar('K')
V = TypeVar('V')


class NullCache(CacheBackend[K, V]):
    """Cache implementation that ignores every put."""

    policy = CachePolicy.NONE

    def __init__(self, name: str = "none"):
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def capacity(self) -> int:
        return 0

    @property
    def default_ttl(self) -> float:
        return 0

    @property
    def hit_count(self) -> int:
        return 0

    @property
    def miss_count(self) -> int:
        return 0

    def put(self, key: K, value: V, ttl: Optional[float] = None) -> None:
        # ignore
        pass

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        return default

    def remove(self, key: K) -> None:
        pass

    def clear(self) -> None:
        pass

    def size(self) -> int:
        return 0

    def is_full(self) -> bool:
        return True

    def prune(self) -> int:
        return 0

    def iterate(self) -> CacheValuesIterator[V]:
        return CacheValuesIterator((), lambda entry: False, lambda entry: None)
