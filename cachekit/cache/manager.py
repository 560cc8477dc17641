"""
Cache Manager Module

This module provides the cache factory and a registry of named caches.
The module-level manager is created on first use and configured from
CacheSettings, with a "default" cache of the configured policy.
"""

import threading
import time
from typing import Any, Callable, Dict, List, Optional, Union

from cachekit.cache.base import CacheBackend, CachePolicy
from cachekit.cache.fifo import FIFOCache
from cachekit.cache.file_cache import FileLFUCache
from cachekit.cache.lfu import LFUCache
from cachekit.cache.lru import LRUCache
from cachekit.cache.null import NullCache
from cachekit.cache.scheduler import PruneScheduler
from cachekit.cache.timed import TimedCache
from cachekit.common.config import CacheSettings, get_settings
from cachekit.common.exceptions import CacheError, ConfigurationError
from cachekit.common.logger import configure_logger, get_logger, log_execution_time

logger = get_logger(__name__)

DEFAULT_CACHE_NAME = "default"

_STRATEGIES = {
    CachePolicy.FIFO: FIFOCache,
    CachePolicy.LRU: LRUCache,
    CachePolicy.LFU: LFUCache,
}


def _to_policy(policy: Union[CachePolicy, str]) -> CachePolicy:
    if isinstance(policy, CachePolicy):
        return policy
    try:
        return CachePolicy(str(policy).lower())
    except ValueError:
        raise ConfigurationError(f"Unknown cache policy: {policy}", config_key="policy") from None


def create_cache(
    policy: Union[CachePolicy, str],
    capacity: int = 0,
    default_ttl: float = 0,
    name: Optional[str] = None,
    clock: Optional[Callable[[], float]] = None
) -> CacheBackend:
    """
    Create a cache for an eviction policy.

    Args:
        policy: Eviction policy, as a CachePolicy or its value
        capacity: Maximum number of entries, 0 for unbounded
        default_ttl: Default time-to-live in seconds, 0 for no expiration
        name: Name of the cache
        clock: Time source in seconds

    Returns:
        The new cache

    Raises:
        ConfigurationError: If the policy is unknown
    """
    policy = _to_policy(policy)
    clock = clock or time.monotonic

    if policy is CachePolicy.NONE:
        return NullCache(name=name or policy.value)

    if policy is CachePolicy.TTL:
        if capacity:
            logger.warning(f"Capacity {capacity} ignored for a TTL cache; TTL caches are unbounded")
        return TimedCache(default_ttl=default_ttl, name=name, clock=clock)

    return _STRATEGIES[policy](capacity=capacity, default_ttl=default_ttl, name=name, clock=clock)


def create_file_cache(settings: Optional[CacheSettings] = None) -> FileLFUCache:
    """
    Create a file content cache from settings.

    Args:
        settings: Settings to use (defaults to the loaded settings)

    Returns:
        The new file cache
    """
    settings = settings or get_settings()
    return FileLFUCache(
        max_bytes=settings.file_cache_max_bytes,
        max_file_size=settings.file_cache_max_file_size,
        default_ttl=settings.default_ttl
    )


class CacheManager:
    """
    Registry of named caches.

    Features:
    - Register, look up and remove caches by name
    - Prune or clear every registered cache at once
    - Optional scheduled pruning per cache
    - Aggregated statistics
    """

    def __init__(self):
        self._caches: Dict[str, CacheBackend] = {}
        self._schedulers: Dict[str, PruneScheduler] = {}
        self._lock = threading.RLock()

    @property
    def names(self) -> List[str]:
        """Names of the registered caches."""
        with self._lock:
            return list(self._caches)

    def register(
        self,
        cache: CacheBackend,
        name: Optional[str] = None,
        prune_interval: float = 0
    ) -> CacheBackend:
        """
        Register a cache, replacing any cache with the same name.

        Args:
            cache: The cache to register
            name: Registry name (defaults to the cache's name)
            prune_interval: Seconds between scheduled prunes, 0 for none

        Returns:
            The registered cache
        """
        name = name or cache.name
        with self._lock:
            self._stop_scheduler(name)
            self._caches[name] = cache
            if prune_interval > 0:
                scheduler = PruneScheduler(cache, prune_interval)
                scheduler.start()
                self._schedulers[name] = scheduler
        logger.info(f"Registered {cache.policy.value} cache '{name}'")
        return cache

    def get_cache(self, name: str = DEFAULT_CACHE_NAME) -> CacheBackend:
        """
        Get a registered cache by name.

        Raises:
            CacheError: If no cache with the given name is registered
        """
        with self._lock:
            cache = self._caches.get(name)
        if cache is None:
            raise CacheError(f"No cache registered with name '{name}'")
        return cache

    def remove_cache(self, name: str) -> bool:
        """
        Unregister a cache.

        Returns:
            True if a cache was removed, False otherwise
        """
        with self._lock:
            self._stop_scheduler(name)
            removed = self._caches.pop(name, None) is not None
        if removed:
            logger.info(f"Removed cache '{name}'")
        return removed

    @log_execution_time(logger)
    def prune_all(self) -> Dict[str, int]:
        """
        Prune every registered cache.

        Returns:
            Dictionary mapping cache names to removed entry counts
        """
        with self._lock:
            caches = list(self._caches.items())
        return {name: cache.prune() for name, cache in caches}

    def clear_all(self) -> None:
        """Clear every registered cache."""
        with self._lock:
            caches = list(self._caches.values())
        for cache in caches:
            cache.clear()

    def shutdown(self) -> None:
        """Stop every scheduled prune."""
        with self._lock:
            for name in list(self._schedulers):
                self._stop_scheduler(name)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get stats for all registered caches.

        Returns:
            Dictionary mapping cache names to their statistics
        """
        with self._lock:
            caches = list(self._caches.items())
        return {name: cache.get_stats() for name, cache in caches}

    def _stop_scheduler(self, name: str) -> None:
        scheduler = self._schedulers.pop(name, None)
        if scheduler is not None:
            scheduler.stop()


# Global cache manager instance
_cache_manager: Optional[CacheManager] = None
_manager_lock = threading.RLock()


def configure_cache(settings: Optional[CacheSettings] = None) -> CacheManager:
    """
    Configure the global cache manager from settings.

    Any previously registered caches are dropped and a fresh default cache
    is created.

    Args:
        settings: Settings to use (defaults to the loaded settings)

    Returns:
        The configured cache manager
    """
    global _cache_manager
    settings = settings or get_settings()
    configure_logger(
        level=settings.log_level,
        use_json=settings.log_format == "json",
        log_file=settings.log_file,
        console=settings.log_console
    )

    with _manager_lock:
        if _cache_manager is not None:
            _cache_manager.shutdown()
        manager = CacheManager()
        default_cache = create_cache(
            settings.policy,
            capacity=settings.capacity,
            default_ttl=settings.default_ttl,
            name=DEFAULT_CACHE_NAME
        )
        manager.register(default_cache, prune_interval=settings.prune_interval)
        _cache_manager = manager

    return manager


def get_cache_manager() -> CacheManager:
    """
    Get the global cache manager instance, configuring it on first use.

    Returns:
        The global cache manager
    """
    with _manager_lock:
        if _cache_manager is None:
            return configure_cache()
        return _cache_manager


def get_cache(name: str = DEFAULT_CACHE_NAME) -> CacheBackend:
    """Get a cache instance by name from the global manager."""
    return get_cache_manager().get_cache(name)


def clear_all_caches() -> None:
    """Clear every cache registered with the global manager."""
    get_cache_manager().clear_all()
