import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from sportsnews.config_loader import load_sources_config
from sportsnews.settings import DEFAULT_SOURCES_PATH, load_settings


class SettingsTests(unittest.TestCase):
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings()
        self.assertEqual(settings.cache_ttl_seconds, 900)
        self.assertEqual(settings.batch_size, 3)
        self.assertEqual(settings.fetch_timeout, 10.0)
        self.assertEqual(settings.default_limit, 20)
        self.assertEqual(settings.sources_path, DEFAULT_SOURCES_PATH)
        self.assertFalse(settings.debug)
        self.assertEqual(settings.warm_interval_minutes, 0)

    def test_environment_overrides(self):
        env = {
            "SPORTSNEWS_CACHE_TTL": "60",
            "SPORTSNEWS_BATCH_SIZE": "5",
            "SPORTSNEWS_DESCRIPTION_LIMIT": "0",
            "SPORTSNEWS_DEBUG": "yes",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings()
        self.assertEqual(settings.cache_ttl_seconds, 60)
        self.assertEqual(settings.batch_size, 5)
        self.assertEqual(settings.description_limit, 0)
        self.assertTrue(settings.debug)

    def test_invalid_values_fall_back_to_defaults(self):
        with patch.dict(os.environ, {"SPORTSNEWS_BATCH_SIZE": "0", "SPORTSNEWS_CACHE_TTL": "soon"}, clear=True):
            settings = load_settings()
        self.assertEqual(settings.batch_size, 3)
        self.assertEqual(settings.cache_ttl_seconds, 900)


    def test_default_limit_never_exceeds_max_limit(self):
        with patch.dict(os.environ, {"SPORTSNEWS_MAX_LIMIT": "10"}, clear=True):
            settings = load_settings()
        self.assertEqual(settings.max_limit, 10)
        self.assertEqual(settings.default_limit, 10)

        with patch.dict(os.environ, {"SPORTSNEWS_MAX_LIMIT": "50", "SPORTSNEWS_DEFAULT_LIMIT": "5"}, clear=True):
            settings = load_settings()
        self.assertEqual(settings.default_limit, 5)


class SourcesConfigTests(unittest.TestCase):
    def test_missing_file_gives_empty_config(self):
        self.assertEqual(load_sources_config(Path(tempfile.gettempdir()) / "no-such-sources.yaml"), {})

    def test_environment_placeholders_expand(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "sources.yaml"
            path.write_text(
                "feeds:\n  nfl:\n    - name: Private\n      url: ${PRIVATE_FEED_URL}\n",
                encoding="utf-8",
            )
            with patch.dict(os.environ, {"PRIVATE_FEED_URL": "https://feeds.test/rss?key=abc123"}):
                config = load_sources_config(path)
        self.assertEqual(config["feeds"]["nfl"][0]["url"], "https://feeds.test/rss?key=abc123")


if __name__ == "__main__":
    unittest.main()
