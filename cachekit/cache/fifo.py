"""
FIFO Cache Module

First in, first out: when the cache is full the oldest inserted entry goes.
"""

from collections import OrderedDict
from typing import Dict, TypeVar

from cachekit.cache.base import CachePolicy
from cachekit.cache.core import AbstractCacheMap
from cachekit.cache.entry import CacheEntry

K = TypeVar('K')
V = TypeVar('V')


class FIFOCache(AbstractCacheMap[K, V]):
    """
    Cache evicting entries in insertion order.

    Re-putting a key replaces its entry and moves it to the back of the
    queue, as if it had just been inserted.
    """

    policy = CachePolicy.FIFO

    def _create_map(self) -> Dict[K, CacheEntry[K, V]]:
        return OrderedDict()

    def _prune_cache(self) -> int:
        """
        Prune expired entries and, if the cache is still full, the oldest one.

        Only one live entry is evicted per call; put() prunes before every
        insertion, so that is enough to stay within capacity.
        """
        count = 0
        first = None
        now = self._clock()
        for key, entry in list(self._cache_map.items()):
            if entry.is_expired(now):
                self._delete_locked(key)
                count += 1
            elif first is None:
                first = key

        if self.is_full() and first is not None:
            self._delete_locked(first)
            count += 1
        return count
