"""
File Cache Module

Caches file contents in memory under a total byte budget, evicting the
least frequently read files first.
"""

import os
import sys
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from cachekit.cache.lfu import LFUCache
from cachekit.common.exceptions import (
    CacheFileNotFoundError,
    FileCacheError,
    FileTooLargeError,
    NotAFileError
)
from cachekit.common.logger import get_logger, log_execution_time

logger = get_logger(__name__)

PathType = Union[str, bytes, os.PathLike]


class _ByteBudgetLFUCache(LFUCache[Path, bytes]):
    """LFU cache that is full when its contents exceed a byte budget."""

    def __init__(self, max_bytes: int, default_ttl: float, clock: Callable[[], float]):
        super().__init__(capacity=0, default_ttl=default_ttl, name="file-lfu", clock=clock)
        self.max_bytes = max_bytes
        # Only changed with the exclusive lock held
        self.used_bytes = 0

    def is_full(self) -> bool:
        return self.used_bytes > self.max_bytes

    def _on_add(self, key: Path, value: bytes) -> None:
        self.used_bytes += len(value)

    def on_remove(self, key: Path, value: bytes) -> None:
        self.used_bytes -= len(value)
        super().on_remove(key, value)


class FileLFUCache:
    """
    LFU cache of file contents.

    Files are keyed by their resolved absolute path. Files larger than
    max_file_size are read and returned but never cached. Reading happens
    outside the cache lock, so slow I/O does not block other callers.
    """

    def __init__(
        self,
        max_bytes: int,
        max_file_size: Optional[int] = None,
        default_ttl: float = 0,
        clock: Callable[[], float] = time.monotonic
    ):
        """
        Initialize the file cache.

        Args:
            max_bytes: Total cache size in bytes
            max_file_size: Largest cacheable file in bytes; None means half of
                max_bytes, 0 means no limit
            default_ttl: Time-to-live of cached files in seconds, 0 for none
            clock: Time source in seconds
        """
        if max_bytes < 0:
            raise ValueError(f"max_bytes must not be negative, got {max_bytes}")
        if max_file_size is None:
            max_file_size = max_bytes // 2
        elif max_file_size < 0:
            raise ValueError(f"max_file_size must not be negative, got {max_file_size}")

        self._cache = _ByteBudgetLFUCache(max_bytes, default_ttl, clock)
        self._max_file_size = max_file_size

    @property
    def max_bytes(self) -> int:
        """Total cache size in bytes."""
        return self._cache.max_bytes

    @property
    def used_bytes(self) -> int:
        """Bytes currently held by cached files."""
        return self._cache.used_bytes

    @property
    def max_file_size(self) -> int:
        """
        Largest file that can be added to the cache, 0 for no limit.

        Larger files are not cached even if there is room.
        """
        return self._max_file_size

    @property
    def default_ttl(self) -> float:
        return self._cache.default_ttl

    def get_cached_files_count(self) -> int:
        """Number of cached files."""
        return self._cache.size()

    def clear(self) -> None:
        """Drop every cached file."""
        self._cache.clear()

    def prune(self) -> int:
        """Prune expired files and, if over budget, the least used ones."""
        return self._cache.prune()

    def get_content(self, path: PathType) -> bytes:
        """
        Return the content of a file, from the cache when possible.

        Args:
            path: Path of the file

        Returns:
            The file's bytes

        Raises:
            CacheFileNotFoundError: If the file does not exist
            NotAFileError: If the path is not a regular file
            FileTooLargeError: If the file cannot be held in memory
        """
        key = self._resolve(path)
        content = self._cache.get(key)
        if content is not None:
            return content

        content = self._read_bytes(key)
        if self._max_file_size and len(content) > self._max_file_size:
            logger.debug(
                f"Not caching {key}: {len(content)} bytes exceeds max file size {self._max_file_size}"
            )
            return content

        logger.debug(f"Caching {key} ({len(content)} bytes)")
        # Prunes the least used files when over budget
        self._cache.put(key, content)
        return content

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the cache.

        Returns:
            Dictionary containing cache statistics
        """
        stats = self._cache.get_stats()
        stats.update({
            'files': self.get_cached_files_count(),
            'max_bytes': self.max_bytes,
            'used_bytes': self.used_bytes,
            'max_file_size': self._max_file_size
        })
        return stats

    @staticmethod
    def _resolve(path: PathType) -> Path:
        return Path(os.fsdecode(path)).expanduser().resolve()

    @staticmethod
    @log_execution_time(logger)
    def _read_bytes(path: Path) -> bytes:
        if not path.exists():
            raise CacheFileNotFoundError(path)
        if not path.is_file():
            raise NotAFileError(path)
        size = path.stat().st_size
        if size >= sys.maxsize:
            raise FileTooLargeError(path, size)

        try:
            with open(path, 'rb') as f:
                return f.read()
        except FileNotFoundError as e:
            raise CacheFileNotFoundError(path, e) from e
        except MemoryError as e:
            raise FileTooLargeError(path, size) from e
        except OSError as e:
            raise FileCacheError("Could not read file", path, e) from e
