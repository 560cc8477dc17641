import unittest

from cachekit.cache import CacheBackend, CachePolicy, NullCache


class TestNullCache(unittest.TestCase):
    """Test the NullCache class."""

    def setUp(self):
        self.cache = NullCache()

    def test_implements_contract(self):
        self.assertIsInstance(self.cache, CacheBackend)
        self.assertEqual(self.cache.policy, CachePolicy.NONE)
        self.assertEqual(self.cache.name, "none")

    def test_put_then_get_is_absent(self):
        for key, value in [("a", 1), (2, "two"), (("t", 1), None)]:
            self.cache.put(key, value)
            self.cache.put(key, value, ttl=10)
            self.assertIsNone(self.cache.get(key))
            self.assertEqual(self.cache.get(key, "default"), "default")

    def test_always_empty_and_full(self):
        self.cache.put("a", 1)
        self.assertEqual(self.cache.size(), 0)
        self.assertEqual(len(self.cache), 0)
        self.assertTrue(self.cache.is_empty())
        self.assertTrue(self.cache.is_full())

    def test_prune_remove_clear(self):
        self.cache.put("a", 1)
        self.assertEqual(self.cache.prune(), 0)
        self.cache.remove("a")
        self.cache.clear()
        self.assertTrue(self.cache.is_empty())

    def test_iterate_is_empty(self):
        values = self.cache.iterate()
        self.assertFalse(values.has_next())
        self.assertEqual(list(values), [])
        self.assertEqual(list(self.cache), [])

    def test_accessors_and_stats(self):
        self.cache.get("missing")
        self.assertEqual(self.cache.capacity, 0)
        self.assertEqual(self.cache.default_ttl, 0)
        stats = self.cache.get_stats()
        self.assertEqual(stats["policy"], "none")
        self.assertEqual(stats["hits"], 0)
        self.assertEqual(stats["misses"], 0)
        self.assertEqual(stats["hit_rate"], 0)


if __name__ == "__main__":
    unittest.main()
