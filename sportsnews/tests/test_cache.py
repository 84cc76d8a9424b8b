import threading
import time
import unittest
from datetime import datetime, timezone

from sportsnews.cache import ArticleCache, make_cache_key
from sportsnews.models import Article, ArticleSource


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _article(title: str) -> Article:
    return Article(
        id=title,
        title=title,
        description="desc",
        content="desc",
        url=f"https://example.com/{title}",
        author="unit",
        published_at=datetime.now(timezone.utc),
        source=ArticleSource(name="unit", url="https://example.com/rss", category="news", sport="nfl"),
        tags=["nfl"],
    )


class CacheKeyTests(unittest.TestCase):
    def test_identical_requests_build_identical_keys(self):
        self.assertEqual(make_cache_key("news", "NFL", None, 20), make_cache_key("news", "nfl", None, 20))
        self.assertEqual(make_cache_key("news", "nfl", None, 20), "news:nfl:-:20")
        self.assertEqual(make_cache_key("trending", 15), "trending:15")

    def test_distinct_parameters_build_distinct_keys(self):
        self.assertNotEqual(make_cache_key("news", "nfl", "official", 20), make_cache_key("news", "nfl", None, 20))
        self.assertNotEqual(make_cache_key("news", "nfl", None, 20), make_cache_key("news", "nfl", None, 21))

    def test_invalid_parts_raise(self):
        with self.assertRaises(ValueError):
            make_cache_key("news", "nfl", None, 0)
        with self.assertRaises(ValueError):
            make_cache_key("", 5)
        with self.assertRaises(ValueError):
            make_cache_key("news", "nfl:evil", None, 5)


class ArticleCacheTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.cache = ArticleCache(ttl_seconds=600, clock=self.clock)

    def test_ttl_boundary(self):
        self.cache.put("news:nfl:-:20", [_article("a")])

        self.clock.advance(600 - 0.001)
        entry = self.cache.get("news:nfl:-:20")
        self.assertIsNotNone(entry)
        self.assertEqual([a.title for a in entry.articles], ["a"])

        self.clock.advance(0.002)
        self.assertIsNone(self.cache.get("news:nfl:-:20"))

    def test_entry_expires_exactly_at_ttl(self):
        self.cache.put("k:1", [_article("a")])
        self.clock.advance(600)
        self.assertIsNone(self.cache.get("k:1"))

    def test_clear_drops_everything(self):
        self.cache.put("k:1", [_article("a")])
        self.cache.put("k:2", [_article("b")])
        self.cache.clear()
        self.assertIsNone(self.cache.get("k:1"))
        self.assertEqual(self.cache.snapshot()["size"], 0)

    def test_stored_entry_is_not_affected_by_caller_mutation(self):
        articles = [_article("a")]
        self.cache.put("k:1", articles)
        articles.append(_article("b"))
        self.assertEqual(len(self.cache.get("k:1").articles), 1)

    def test_get_or_load_hits_after_first_miss(self):
        calls = []

        def loader():
            calls.append(1)
            return [_article("a")]

        _, cached = self.cache.get_or_load("k:1", loader)
        self.assertFalse(cached)
        _, cached = self.cache.get_or_load("k:1", loader)
        self.assertTrue(cached)
        self.assertEqual(len(calls), 1)

    def test_fresh_bypasses_read_but_writes_through(self):
        self.cache.put("k:1", [_article("old")])
        entry, cached = self.cache.get_or_load("k:1", lambda: [_article("new")], fresh=True)
        self.assertFalse(cached)
        self.assertEqual(entry.articles[0].title, "new")
        self.assertEqual(self.cache.get("k:1").articles[0].title, "new")

    def test_loader_failure_is_not_cached(self):
        def broken():
            raise RuntimeError("upstream exploded")

        with self.assertRaises(RuntimeError):
            self.cache.get_or_load("k:1", broken)
        self.assertIsNone(self.cache.get("k:1"))
        self.assertEqual(self.cache.snapshot()["in_flight"], [])

        entry, _ = self.cache.get_or_load("k:1", lambda: [_article("ok")])
        self.assertEqual(entry.articles[0].title, "ok")

    def test_concurrent_misses_share_one_load(self):
        cache = ArticleCache(ttl_seconds=600)
        calls = []
        started = threading.Event()
        release = threading.Event()
        results = []

        def loader():
            calls.append(1)
            started.set()
            release.wait(5)
            return [_article("shared")]

        def worker():
            results.append(cache.get_or_load("news:nfl:-:20", loader))

        first = threading.Thread(target=worker)
        second = threading.Thread(target=worker)
        first.start()
        self.assertTrue(started.wait(5))
        second.start()
        time.sleep(0.05)
        release.set()
        first.join(5)
        second.join(5)

        self.assertEqual(len(calls), 1)
        self.assertEqual(len(results), 2)
        self.assertIs(results[0][0], results[1][0])

    def test_snapshot_lists_live_entries(self):
        self.cache.put("k:1", [_article("a"), _article("b")])
        self.clock.advance(30)
        snapshot = self.cache.snapshot()
        self.assertEqual(snapshot["ttl_seconds"], 600)
        self.assertEqual(snapshot["entries"], [{"key": "k:1", "age_seconds": 30.0, "articles": 2}])


if __name__ == "__main__":
    unittest.main()
