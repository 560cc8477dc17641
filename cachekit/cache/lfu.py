"""
LFU Cache Module

Least frequently used: entries read the fewest times are evicted first.
"""

from typing import TypeVar

from cachekit.cache.base import CachePolicy
from cachekit.cache.core import AbstractCacheMap

K = TypeVar('K')
V = TypeVar('V')


class LFUCache(AbstractCacheMap[K, V]):
    """Cache evicting the least frequently used entries."""

    policy = CachePolicy.LFU

    def _prune_cache(self) -> int:
        """
        Prune expired entries and, if the cache is still full, the LFU ones.

        Eviction normalises access counts: the smallest access count among
        the surviving entries is subtracted from every entry, and entries
        that drop to zero are removed. Every entry tied at the minimum goes
        in the same pass, and the survivors keep their reduced counts.

        Returns:
            Number of removed entries
        """
        count = 0
        least = None
        now = self._clock()

        for key, entry in list(self._cache_map.items()):
            if entry.is_expired(now):
                self._delete_locked(key)
                count += 1
                continue
            # Ties keep the first entry found
            if least is None or entry.access_count < least.access_count:
                least = entry

        if not self.is_full() or least is None:
            return count

        min_access_count = least.access_count
        for key, entry in list(self._cache_map.items()):
            entry.access_count -= min_access_count
            if entry.access_count <= 0:
                self._delete_locked(key)
                count += 1
        return count
