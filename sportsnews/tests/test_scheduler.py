import json
import unittest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

from apscheduler.schedulers.background import BackgroundScheduler
from click.testing import CliRunner

from sportsnews.cli import cli
from sportsnews.errors import InternalAggregationFailure
from sportsnews.models import Article, ArticleSource, NewsResult
from sportsnews.scheduler import schedule_cache_warmer, warm_cache

NOW = datetime(2024, 11, 25, 12, 0, tzinfo=timezone.utc)


def _result(count: int) -> NewsResult:
    source = ArticleSource(name="unit", url="https://unit.test/rss", category="news", sport="nfl")
    articles = [
        Article(
            id=str(n),
            title=f"Story {n}",
            description="",
            content="",
            url=None,
            author="unit",
            published_at=NOW,
            source=source,
            tags=["nfl"],
        )
        for n in range(count)
    ]
    return NewsResult(articles=articles, cached=False, last_updated=NOW)


class WarmCacheTests(unittest.TestCase):
    def test_refreshes_every_sport_and_survives_failures(self):
        pipeline = MagicMock()
        pipeline.registry.sports.return_value = ["general", "nfl", "nba"]
        pipeline.get_news.side_effect = [_result(2), InternalAggregationFailure("boom"), _result(3)]

        total = warm_cache(pipeline)

        self.assertEqual(total, 5)
        self.assertEqual(
            [call.args[0] for call in pipeline.get_news.call_args_list],
            ["general", "nfl", "nba"],
        )
        for call in pipeline.get_news.call_args_list:
            self.assertTrue(call.kwargs["fresh"])

    def test_job_is_registered_on_interval(self):
        scheduler = BackgroundScheduler(timezone="UTC")
        schedule_cache_warmer(scheduler, MagicMock(), interval_minutes=10)
        job = scheduler.get_job("warm_news_cache")
        self.assertIsNotNone(job)
        self.assertEqual(job.trigger.interval.total_seconds(), 600)


class CliTests(unittest.TestCase):
    def test_news_prints_articles(self):
        pipeline = MagicMock()
        pipeline.get_news.return_value = _result(2)
        with patch("sportsnews.cli.NewsPipeline", return_value=pipeline):
            outcome = CliRunner().invoke(cli, ["news", "--sport", "nfl", "--limit", "2"])

        self.assertEqual(outcome.exit_code, 0, outcome.output)
        payload = json.loads(outcome.output)
        self.assertEqual([article["title"] for article in payload], ["Story 0", "Story 1"])
        pipeline.get_news.assert_called_once_with("nfl", category=None, limit=2)

    def test_engine_errors_exit_non_zero(self):
        pipeline = MagicMock()
        pipeline.get_news.side_effect = InternalAggregationFailure("boom")
        with patch("sportsnews.cli.NewsPipeline", return_value=pipeline):
            outcome = CliRunner().invoke(cli, ["news"])
        self.assertEqual(outcome.exit_code, 1)
        self.assertIn("boom", outcome.output)


if __name__ == "__main__":
    unittest.main()
