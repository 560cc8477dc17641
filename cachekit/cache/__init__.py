"""
In-Process Caching

This package provides thread-safe in-memory caches with interchangeable
eviction policies (FIFO, LRU, LFU and TTL-only) behind one interface, a
null cache for switching caching off, and an LFU cache of file contents.
"""

import functools
import hashlib
import logging
from typing import Any, Callable, Optional, TypeVar, cast

from cachekit.cache.base import CacheBackend, CachePolicy
from cachekit.cache.entry import CacheEntry
from cachekit.cache.core import AbstractCacheMap
from cachekit.cache.iterator import CacheValuesIterator
from cachekit.cache.fifo import FIFOCache
from cachekit.cache.lru import LRUCache
from cachekit.cache.lfu import LFUCache
from cachekit.cache.timed import TimedCache
from cachekit.cache.null import NullCache
from cachekit.cache.file_cache import FileLFUCache
from cachekit.cache.scheduler import PruneScheduler
from cachekit.cache.manager import (
    CacheManager,
    create_cache,
    create_file_cache,
    get_cache_manager,
    configure_cache,
    get_cache,
    clear_all_caches
)

logger = logging.getLogger(__name__)

# Public API
__all__ = [
    # Cache types and policies
    'CacheBackend',
    'CachePolicy',
    'CacheEntry',
    'AbstractCacheMap',
    'CacheValuesIterator',

    # Cache implementations
    'FIFOCache',
    'LRUCache',
    'LFUCache',
    'TimedCache',
    'NullCache',
    'FileLFUCache',
    'PruneScheduler',

    # Cache management
    'CacheManager',
    'create_cache',
    'create_file_cache',
    'get_cache_manager',
    'configure_cache',
    'get_cache',
    'clear_all_caches',

    # Cache decorators
    'cached',
]

F = TypeVar('F', bound=Callable[..., Any])

_MISSING = object()


def cached(
    cache: Optional[CacheBackend] = None,
    ttl: Optional[float] = None,
    key_prefix: str = "",
    key_builder: Optional[Callable[..., str]] = None
) -> Callable[[F], F]:
    """
    Decorator for caching function results.

    Args:
        cache: Cache to store results in (defaults to the global default cache)
        ttl: Time to live for cached results in seconds; None uses the cache default
        key_prefix: Prefix for the cache key
        key_builder: Optional function to build custom cache keys

    Returns:
        Decorated function that uses the cache
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            target = cache if cache is not None else get_cache()

            if key_builder:
                cache_key = key_builder(*args, **kwargs)
            else:
                key_parts = [func.__module__, func.__qualname__]
                key_parts.extend(repr(arg) for arg in args)
                # Sorted so keyword order does not matter
                key_parts.extend(f"{k}={kwargs[k]!r}" for k in sorted(kwargs))
                key_str = ":".join(key_parts)
                hashed = hashlib.md5(key_str.encode('utf-8')).hexdigest()
                cache_key = f"{key_prefix}:{hashed}" if key_prefix else hashed

            result = target.get(cache_key, _MISSING)
            if result is not _MISSING:
                logger.debug(f"Cache hit for {func.__name__} with key {cache_key}")
                return result

            logger.debug(f"Cache miss for {func.__name__} with key {cache_key}")
            result = func(*args, **kwargs)
            target.put(cache_key, result, ttl)
            return result

        return cast(F, wrapper)

    return decorator
