"""
Prune Scheduler Module

Runs a cache's prune() at a fixed interval on a daemon thread. Caches never
prune on a timer by themselves; this is the wiring for callers who want it.
"""

import threading
from typing import Optional

from cachekit.cache.base import CacheBackend
from cachekit.common.logger import get_logger

logger = get_logger(__name__)


class PruneScheduler:
    """
    Periodically prunes a cache.

    Example:
        with PruneScheduler(cache, interval=30):
            serve_requests()
    """

    def __init__(self, cache: CacheBackend, interval: float):
        """
        Initialize the scheduler.

        Args:
            cache: Cache whose prune() is called
            interval: Seconds between prunes
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._cache = cache
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self.runs = 0
        self.pruned = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        """Whether the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread. Does nothing if already running."""
        with self._lock:
            if self.running:
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name=f"cachekit-prune-{self._cache.name}",
                daemon=True
            )
            self._thread.start()
        logger.info(f"Scheduled prune of cache '{self._cache.name}' every {self._interval}s")

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop the background thread and wait for it to exit.

        Args:
            timeout: Maximum seconds to wait for the thread
        """
        with self._lock:
            thread = self._thread
            self._thread = None
            self._stop_event.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            logger.info(f"Stopped scheduled prune of cache '{self._cache.name}'")

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval):
            try:
                removed = self._cache.prune()
            except Exception:
                logger.exception(f"Scheduled prune of cache '{self._cache.name}' failed")
                continue
            self.runs += 1
            self.pruned += removed

    def __enter__(self) -> 'PruneScheduler':
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
