"""
LRU Cache Module

Least recently used: the entry that has gone unread the longest is evicted.
"""

from collections import OrderedDict
from typing import Dict, TypeVar

from cachekit.cache.base import CachePolicy
from cachekit.cache.core import AbstractCacheMap
from cachekit.cache.entry import CacheEntry

K = TypeVar('K')
V = TypeVar('V')


class LRUCache(AbstractCacheMap[K, V]):
    """
    Cache evicting the least recently used entry.

    The backing OrderedDict is kept in access order: hits and puts move an
    entry to the back, and an insertion that takes the map past capacity
    drops the front entry immediately. prune() therefore only has expired
    entries left to remove.
    """

    policy = CachePolicy.LRU

    # Hits reorder the map
    exclusive_reads = True

    def _create_map(self) -> Dict[K, CacheEntry[K, V]]:
        return OrderedDict()

    def _on_access(self, key: K) -> None:
        self._cache_map.move_to_end(key)

    def _after_insert(self, key: K) -> None:
        while self.remove_eldest_entry(len(self._cache_map)):
            eldest = next(iter(self._cache_map))
            self._delete_locked(eldest)

    def remove_eldest_entry(self, current_size: int) -> bool:
        """Whether the eldest entry should go, given the current map size."""
        if self._capacity == 0:
            return False
        return current_size > self._capacity

    def _prune_cache(self) -> int:
        """Prune expired entries only; capacity is enforced on insertion."""
        if not self.is_prune_expired_active():
            return 0
        return self._prune_expired()
