"""
Timed Cache Module

A cache without capacity limits whose entries only leave by expiring.
"""

import threading
import time
from typing import Callable, Optional, TypeVar

from cachekit.cache.base import CachePolicy
from cachekit.cache.core import AbstractCacheMap, RemovalListener
from cachekit.cache.scheduler import PruneScheduler

K = TypeVar('K')
V = TypeVar('V')


class TimedCache(AbstractCacheMap[K, V]):
    """
    Unbounded cache pruned by expiry alone.

    Expired entries are dropped lazily by get(), or in bulk by prune(),
    which can be run periodically with schedule_prune().
    """

    policy = CachePolicy.TTL

    def __init__(
        self,
        default_ttl: float = 0,
        name: Optional[str] = None,
        removal_listener: Optional[RemovalListener] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the cache.

        Args:
            default_ttl: Default time-to-live in seconds, 0 for no expiration
            name: Name of this cache
            removal_listener: Called with (key, value) for every removed entry
            clock: Time source in seconds
        """
        super().__init__(
            capacity=0,
            default_ttl=default_ttl,
            name=name,
            removal_listener=removal_listener,
            clock=clock
        )
        self._prune_scheduler: Optional[PruneScheduler] = None
        self._schedule_lock = threading.Lock()

    def _prune_cache(self) -> int:
        """Prune expired entries. Nothing to scan when no TTL was ever in play."""
        if not self.is_prune_expired_active():
            return 0
        return self._prune_expired()

    def schedule_prune(self, delay: float) -> PruneScheduler:
        """
        Prune every delay seconds on a background thread.

        Replaces any schedule already running.

        Args:
            delay: Seconds between prunes

        Returns:
            The running scheduler
        """
        scheduler = PruneScheduler(self, delay)
        with self._schedule_lock:
            self._stop_schedule_locked()
            scheduler.start()
            self._prune_scheduler = scheduler
        return scheduler

    def cancel_prune_schedule(self) -> None:
        """Stop the scheduled prunes, if any."""
        with self._schedule_lock:
            self._stop_schedule_locked()

    def _stop_schedule_locked(self) -> None:
        if self._prune_scheduler is not None:
            self._prune_scheduler.stop()
            self._prune_scheduler = None
