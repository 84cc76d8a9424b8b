import unittest

from sportsnews.config_loader import load_sources_config
from sportsnews.errors import InvalidQuery
from sportsnews.registry import FeedRegistry
from sportsnews.settings import DEFAULT_SOURCES_PATH

CONFIG = {
    "feeds": {
        "nfl": [
            {"name": "ESPN NFL", "url": "https://espn.test/nfl", "category": "news"},
            {"name": "NFL.com", "url": "https://nfl.test/rss", "category": "official"},
            {"url": "https://broken.test/no-name"},
        ],
        "general": [
            {"name": "ESPN", "url": "https://espn.test/top", "category": "news"},
            {"name": "ESPN NFL mirror", "url": "https://espn.test/nfl", "category": "news"},
        ],
    }
}


class FeedRegistryTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = FeedRegistry.from_config(CONFIG)

    def test_resolves_by_lowercase_sport(self):
        names = [feed.name for feed in self.registry.resolve("NFL")]
        self.assertEqual(names, ["ESPN NFL", "NFL.com"])

    def test_unknown_sport_falls_back_to_general(self):
        self.assertEqual([feed.name for feed in self.registry.resolve("curling")], ["ESPN", "ESPN NFL mirror"])

    def test_category_filter(self):
        self.assertEqual([feed.name for feed in self.registry.resolve("nfl", "official")], ["NFL.com"])
        self.assertEqual(self.registry.resolve("nfl", "rumor"), [])

    def test_all_sources_are_unique_by_url(self):
        urls = [feed.url for feed in self.registry.all_sources()]
        self.assertEqual(len(urls), len(set(urls)))
        self.assertEqual(len(urls), 3)

    def test_validation(self):
        self.assertEqual(self.registry.validate_sport(" NFL "), "nfl")
        self.assertEqual(self.registry.validate_sport(None), "general")
        with self.assertRaises(InvalidQuery) as ctx:
            self.registry.validate_sport("curling")
        self.assertEqual(ctx.exception.valid_values, ["general", "nfl"])

        self.assertIsNone(self.registry.validate_category(""))
        self.assertEqual(self.registry.validate_category("Official"), "official")
        with self.assertRaises(InvalidQuery):
            self.registry.validate_category("gossip")

    def test_summary_counts_feeds(self):
        summary = self.registry.summary()
        self.assertEqual(summary["totalFeeds"], 4)
        by_sport = {entry["sport"]: entry["feeds"] for entry in summary["sources"]}
        self.assertEqual(by_sport, {"general": 2, "nfl": 2})

    def test_bundled_sources_cover_every_sport(self):
        registry = FeedRegistry.from_config(load_sources_config(DEFAULT_SOURCES_PATH))
        self.assertEqual(set(registry.sports()), {"general", "nfl", "nba", "mlb"})
        self.assertTrue(set(registry.categories()) >= {"news", "official", "rumor", "analysis"})

    def test_empty_config_gives_empty_general(self):
        registry = FeedRegistry.from_config({})
        self.assertEqual(registry.sports(), ["general"])
        self.assertEqual(registry.resolve("nfl"), [])


if __name__ == "__main__":
    unittest.main()
