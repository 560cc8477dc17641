"""
Tests for the behaviour shared by every map-backed cache.

Each test runs against the FIFO, LRU and LFU strategies.
"""

import pytest

from cachekit.cache import FIFOCache, LFUCache, LRUCache, TimedCache
from cachekit.cache.core import AbstractCacheMap

STRATEGIES = [FIFOCache, LRUCache, LFUCache]


@pytest.fixture(params=STRATEGIES, ids=lambda cls: cls.__name__)
def cache_cls(request):
    return request.param


def test_put_and_get(cache_cls, clock):
    cache = cache_cls(capacity=10, clock=clock)
    cache.put("key", {"test": "value"})

    assert cache.get("key") == {"test": "value"}
    assert cache.get("missing") is None
    assert cache.get("missing", "fallback") == "fallback"
    assert cache.hit_count == 1
    assert cache.miss_count == 2


def test_accessors(cache_cls):
    cache = cache_cls(capacity=5, default_ttl=30, name="accessors")
    assert cache.capacity == 5
    assert cache.default_ttl == 30
    assert cache.name == "accessors"
    assert cache_cls(capacity=1).name == cache_cls.policy.value


def test_negative_arguments_rejected(cache_cls):
    with pytest.raises(ValueError):
        cache_cls(capacity=-1)
    with pytest.raises(ValueError):
        cache_cls(capacity=1, default_ttl=-1)
    with pytest.raises(ValueError):
        cache_cls(capacity=1).put("key", "value", ttl=-5)


def test_expired_entry_is_removed_by_get(cache_cls, clock):
    cache = cache_cls(capacity=10, clock=clock)
    cache.put("short", "value", ttl=0.05)
    cache.put("forever", "value", ttl=0)

    clock.advance(0.06)
    assert cache.size() == 2
    assert cache.get("short") is None
    assert cache.size() == 1
    assert cache.miss_count == 1

    clock.advance(10 ** 6)
    assert cache.get("forever") == "value"


def test_default_ttl_applies(cache_cls, clock):
    cache = cache_cls(capacity=10, default_ttl=5, clock=clock)
    cache.put("key", "value")
    clock.advance(4)
    # A hit restarts the TTL
    assert cache.get("key") == "value"
    clock.advance(4)
    assert cache.get("key") == "value"
    clock.advance(5)
    assert cache.get("key") is None


def test_custom_ttl_flag_is_sticky(cache_cls):
    cache = cache_cls(capacity=10)
    assert not cache.custom_ttl_used
    assert not cache.is_prune_expired_active()

    cache.put("key", "value", ttl=10)
    cache.put("other", "value")
    cache.clear()
    assert cache.custom_ttl_used
    assert cache.is_prune_expired_active()


def test_overwrite_replaces_entry(cache_cls, clock):
    cache = cache_cls(capacity=10, clock=clock)
    cache.put("key", "first", ttl=1)
    cache.get("key")
    cache.put("key", "second")

    assert cache.size() == 1
    entry = cache._cache_map["key"]
    assert entry.value == "second"
    assert entry.access_count == 0
    clock.advance(100)
    assert cache.get("key") == "second"


def test_remove_is_idempotent(cache_cls):
    cache = cache_cls(capacity=10)
    cache.put("key", "value")
    cache.put("other", "value")

    cache.remove("key")
    cache.remove("key")
    cache.remove("never-there")
    assert cache.size() == 1
    assert cache.get("key") is None


def test_clear_keeps_counters(cache_cls):
    cache = cache_cls(capacity=10)
    cache.put("key", "value")
    cache.get("key")
    cache.get("missing")

    cache.clear()
    assert cache.size() == 0
    assert cache.is_empty()
    assert cache.hit_count == 1
    assert cache.miss_count == 1


def test_is_full(cache_cls):
    cache = cache_cls(capacity=2)
    assert not cache.is_full()
    cache.put("a", 1)
    assert not cache.is_full()
    cache.put("b", 2)
    assert cache.is_full()


def test_unbounded_cache_is_never_full(cache_cls):
    cache = cache_cls(capacity=0)
    for i in range(500):
        cache.put(i, i)
    assert cache.size() == 500
    assert not cache.is_full()


@pytest.mark.parametrize("capacity", [1, 2, 3, 7])
def test_size_never_exceeds_capacity(cache_cls, capacity):
    cache = cache_cls(capacity=capacity)
    for i in range(50):
        cache.put(i % 13, i)
        if i % 3 == 0:
            cache.get((i * 7) % 13)
        assert cache.size() <= capacity


def test_removal_listener_sees_every_removal(cache_cls, clock):
    removed = []
    cache = cache_cls(
        capacity=10,
        clock=clock,
        removal_listener=lambda key, value: removed.append((key, value))
    )
    cache.put("a", 1)
    cache.put("b", 2, ttl=1)
    cache.put("c", 3)
    cache.put("d", 4)

    cache.remove("a")
    cache.put("c", 30)
    clock.advance(2)
    cache.get("b")
    cache.clear()

    assert removed == [("a", 1), ("c", 3), ("b", 2), ("d", 4), ("c", 30)]


def test_prune_on_non_full_cache_removes_only_expired(cache_cls, clock):
    cache = cache_cls(capacity=10, clock=clock)
    cache.put("a", 1, ttl=1)
    cache.put("b", 2, ttl=1)
    cache.put("c", 3)

    assert cache.prune() == 0
    clock.advance(1)
    assert cache.prune() == 2
    assert cache.size() == 1
    assert cache.get("c") == 3


def test_len_and_iter(cache_cls):
    cache = cache_cls(capacity=10)
    cache.put("a", 1)
    cache.put("b", 2)
    assert len(cache) == 2
    assert sorted(cache) == [1, 2]


def test_get_stats(cache_cls):
    cache = cache_cls(capacity=4, default_ttl=60, name="stats")
    cache.put("key", "value")
    cache.get("key")
    cache.get("missing")

    stats = cache.get_stats()
    assert stats == {
        'name': 'stats',
        'policy': cache_cls.policy.value,
        'size': 1,
        'capacity': 4,
        'default_ttl': 60,
        'hits': 1,
        'misses': 1,
        'hit_rate': 0.5
    }


def test_engine_is_abstract():
    with pytest.raises(TypeError):
        AbstractCacheMap(capacity=1)


def test_subclass_can_override_on_remove():
    class CountingCache(LFUCache):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            self.removed_keys = []

        def on_remove(self, key, value):
            self.removed_keys.append(key)

    cache = CountingCache(capacity=1)
    cache.put("a", 1)
    cache.put("b", 2)
    assert cache.removed_keys == ["a"]


def test_timed_cache_has_no_capacity():
    cache = TimedCache(default_ttl=10)
    assert cache.capacity == 0
    for i in range(100):
        cache.put(i, i)
    assert not cache.is_full()
    assert cache.size() == 100
