"""
Tests for CacheValuesIterator.
"""

import pytest

from cachekit.cache import FIFOCache, LFUCache, TimedCache
from cachekit.common.exceptions import CacheError


def test_expired_entries_skipped_but_kept(clock):
    cache = FIFOCache(capacity=10, clock=clock)
    cache.put("expired", "old", ttl=1)
    cache.put("live", "new")
    clock.advance(1)

    assert list(cache.iterate()) == ["new"]
    # Skipping does not evict
    assert cache.size() == 2

    assert cache.prune() == 1
    assert cache.size() == 1


def test_has_next_and_next(clock):
    cache = FIFOCache(capacity=10, clock=clock)
    cache.put("a", 1, ttl=1)
    cache.put("b", 2)
    cache.put("c", 3, ttl=1)
    cache.put("d", 4)
    clock.advance(1)

    values = cache.iterate()
    assert values.has_next()
    assert next(values) == 2
    assert values.has_next()
    assert next(values) == 4
    assert not values.has_next()
    with pytest.raises(StopIteration):
        next(values)


def test_empty_cache_iterator():
    values = LFUCache(capacity=2).iterate()
    assert not values.has_next()
    assert list(values) == []


def test_remove_deletes_last_returned_entry(clock):
    removed = []
    cache = FIFOCache(capacity=10, clock=clock, removal_listener=lambda k, v: removed.append(k))
    cache.put("a", 1)
    cache.put("b", 2, ttl=1)
    cache.put("c", 3)
    clock.advance(1)

    values = cache.iterate()
    assert next(values) == 1
    # The lookahead has already skipped past the expired "b"
    assert next(values) == 3
    values.remove()

    assert removed == ["c"]
    assert sorted(cache._cache_map) == ["a", "b"]


def test_remove_requires_next():
    cache = FIFOCache(capacity=10)
    cache.put("a", 1)
    values = cache.iterate()

    with pytest.raises(CacheError):
        values.remove()

    next(values)
    values.remove()
    with pytest.raises(CacheError):
        values.remove()
    assert cache.is_empty()


def test_remove_ignores_replaced_entry():
    cache = FIFOCache(capacity=10)
    cache.put("a", 1)
    values = cache.iterate()
    next(values)

    cache.put("a", 2)
    values.remove()
    assert cache.get("a") == 2


def test_cache_can_change_during_iteration():
    cache = TimedCache(default_ttl=60)
    for i in range(5):
        cache.put(i, i * 10)

    values = cache.iterate()
    assert next(values) == 0
    cache.put(99, 990)
    cache.remove(2)
    cache.clear()
    cache.put(1, -1)

    # Entries gone since the snapshot are skipped; new ones are not visited
    assert list(values) == []


def test_removal_while_iterating_every_value():
    cache = FIFOCache(capacity=10)
    for i in range(5):
        cache.put(i, i)

    values = cache.iterate()
    seen = []
    for value in values:
        seen.append(value)
        if value % 2 == 0:
            values.remove()

    assert seen == [0, 1, 2, 3, 4]
    assert sorted(cache._cache_map) == [1, 3]
