"""
Cache Values Iterator

Single-pass iterator over the live values of a cache. Expired entries are
skipped but left in place; only remove() deletes anything, and then only the
entry most recently returned.
"""

from typing import Callable, Generic, Iterable, Optional, TypeVar

from cachekit.cache.entry import CacheEntry
from cachekit.common.exceptions import CacheError

V = TypeVar('V')


class CacheValuesIterator(Generic[V]):
    """
    Iterator over non-expired cache values.

    The iterator walks a snapshot of the cache's entries, so the cache may be
    mutated while it is in use. Entries that have left the cache since the
    snapshot was taken are skipped. It does no locking of its own.
    """

    def __init__(
        self,
        entries: Iterable[CacheEntry],
        is_live: Callable[[CacheEntry], bool],
        remover: Callable[[CacheEntry], None]
    ):
        """
        Args:
            entries: Snapshot of the cache's entries in iteration order
            is_live: Returns whether an entry is still held by the cache
            remover: Removes an entry from the cache
        """
        self._entries = iter(entries)
        self._is_live = is_live
        self._remover = remover
        self._next_entry: Optional[CacheEntry] = None
        self._last_entry: Optional[CacheEntry] = None
        self._advance()

    def _usable(self, entry: CacheEntry) -> bool:
        return not entry.is_expired() and self._is_live(entry)

    def _advance(self) -> None:
        """Move the lookahead to the next non-expired entry, or None."""
        for entry in self._entries:
            if self._usable(entry):
                self._next_entry = entry
                return
        self._next_entry = None

    def _revalidate(self) -> None:
        # The lookahead may have expired or left the cache since it was chosen
        if self._next_entry is not None and not self._usable(self._next_entry):
            self._advance()

    def has_next(self) -> bool:
        """Returns True if there are more values."""
        self._revalidate()
        return self._next_entry is not None

    def __iter__(self) -> 'CacheValuesIterator[V]':
        return self

    def __next__(self) -> V:
        self._revalidate()
        entry = self._next_entry
        if entry is None:
            raise StopIteration
        self._last_entry = entry
        self._advance()
        return entry.value

    def remove(self) -> None:
        """Remove the value most recently returned by next() from the cache."""
        if self._last_entry is None:
            raise CacheError("remove() must follow a call to next()")
        entry, self._last_entry = self._last_entry, None
        self._remover(entry)
