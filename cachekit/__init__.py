"""
cachekit

Thread-safe in-process key-value caches with interchangeable eviction
strategies:
1. FIFO, LRU and LFU caches bounded by entry count
2. TTL-only caches with optional scheduled pruning
3. A null cache for switching caching off at call sites
4. An LFU cache of file contents bounded by total bytes
"""

__version__ = "0.1.0"

from cachekit.cache import (
    CacheBackend,
    CachePolicy,
    FIFOCache,
    LRUCache,
    LFUCache,
    TimedCache,
    NullCache,
    FileLFUCache,
    PruneScheduler,
    create_cache,
    cached
)

__all__ = [
    'CacheBackend',
    'CachePolicy',
    'FIFOCache',
    'LRUCache',
    'LFUCache',
    'TimedCache',
    'NullCache',
    'FileLFUCache',
    'PruneScheduler',
    'create_cache',
    'cached',
]
