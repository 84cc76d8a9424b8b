"""
High-level orchestration: resolve feeds, fetch in bounded batches, normalize,
dedupe, sort, limit and cache.
"""
from __future__ import annotations

import logging
import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple

from feeds.infra.http import redact_url
from sportsnews.cache import ArticleCache, CacheEntry, make_cache_key
from sportsnews.categorizer import Categorizer
from sportsnews.config_loader import load_sources_config
from sportsnews.dedupe import dedupe
from sportsnews.errors import FeedUnavailable, InternalAggregationFailure, InvalidQuery, SportsNewsError
from sportsnews.fetcher import FeedFetcher
from sportsnews.models import GENERAL, Article, FeedSource, HealthStatus, NewsResult
from sportsnews.normalizer import Normalizer
from sportsnews.registry import FeedRegistry
from sportsnews.settings import NewsSettings, load_settings

logger = logging.getLogger(__name__)

TEAM_POOL_LIMIT = 50
BREAKING_POOL_LIMIT = 50
BREAKING_KEYWORD = "breaking"
MAX_BREAKING_HOURS = 24 * 365


def sort_by_recency(articles: Sequence[Article]) -> List[Article]:
    # sorted() is stable with reverse=True, so ties keep their input order
    return sorted(articles, key=lambda article: article.published_at, reverse=True)


class NewsPipeline:
    def __init__(
        self,
        settings: Optional[NewsSettings] = None,
        registry: Optional[FeedRegistry] = None,
        categorizer: Optional[Categorizer] = None,
        fetcher: Optional[FeedFetcher] = None,
        cache: Optional[ArticleCache] = None,
    ) -> None:
        self.settings = settings or load_settings()
        config: Dict[str, Any] = {}
        if registry is None or categorizer is None:
            config = load_sources_config(self.settings.sources_path)
        self.registry = registry or FeedRegistry.from_config(config)
        self.categorizer = categorizer or Categorizer.from_config(config)
        self.normalizer = Normalizer(self.categorizer, description_limit=self.settings.description_limit or None)
        self.fetcher = fetcher or FeedFetcher(timeout=self.settings.fetch_timeout, user_agent=self.settings.user_agent)
        self.cache = cache or ArticleCache(ttl_seconds=self.settings.cache_ttl_seconds)
        self._health: Dict[str, HealthStatus] = {}
        self._health_lock = threading.Lock()

    def get_news(
        self,
        sport: Optional[str] = GENERAL,
        category: Optional[str] = None,
        limit: Optional[int] = None,
        fresh: bool = False,
    ) -> NewsResult:
        """Public entry point: validates every parameter, then aggregates."""
        return self.fetch_articles(sport, category, self.validate_limit(limit), fresh=fresh)

    def fetch_articles(
        self,
        sport: Optional[str],
        category: Optional[str],
        limit: int,
        fresh: bool = False,
    ) -> NewsResult:
        sport = self.registry.validate_sport(sport)
        category = self.registry.validate_category(category)

        def load() -> List[Article]:
            return self._aggregate(self.registry.resolve(sport, category), sport, limit)

        return self._cached("news", (sport, category, limit), load, fresh)

    def get_trending_articles(self, limit: int = 15, fresh: bool = False) -> NewsResult:
        """Newest articles across every configured feed, each classified by sport."""
        limit = self.validate_limit(limit)

        def load() -> List[Article]:
            return self._aggregate(
                self.registry.all_sources(),
                GENERAL,
                limit,
                per_feed_limit=self.settings.trending_per_feed,
            )

        return self._cached("trending", (limit,), load, fresh)

    def get_team_news(self, team: str, sport: Optional[str] = GENERAL, limit: int = 10) -> List[Article]:
        needle = (team or "").strip().lower()
        if not needle:
            raise InvalidQuery("team", team, message="Team name is required")
        limit = self.validate_limit(limit)
        pool = self.fetch_articles(sport, None, TEAM_POOL_LIMIT).articles
        matches = [article for article in pool if needle in f"{article.title} {article.description}".lower()]
        return matches[:limit]

    def get_breaking_news(self, sport: Optional[str] = GENERAL, hours: float = 2, now: Optional[datetime] = None) -> List[Article]:
        if not (math.isfinite(hours) and 0 < hours <= MAX_BREAKING_HOURS):
            raise InvalidQuery("hours", hours, message=f"hours must be between 0 and {MAX_BREAKING_HOURS}")
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(hours=hours)
        pool = self.fetch_articles(sport, None, BREAKING_POOL_LIMIT).articles
        # undated items carry a stand-in timestamp and never count as recent
        return [
            article
            for article in pool
            if article.dated
            and article.published_at > cutoff
            and (
                BREAKING_KEYWORD in article.title.lower()
                or BREAKING_KEYWORD in article.description.lower()
                or BREAKING_KEYWORD in article.tags
            )
        ]

    def clear_cache(self) -> None:
        self.cache.clear()

    def get_health(self) -> List[HealthStatus]:
        with self._health_lock:
            return list(self._health.values())

    def validate_limit(self, limit: Any) -> int:
        if limit is None:
            return self.settings.default_limit
        if isinstance(limit, bool):
            raise InvalidQuery("limit", limit, message="limit must be an integer")
        try:
            value = int(limit)
        except (TypeError, ValueError):
            raise InvalidQuery("limit", limit, message="limit must be an integer") from None
        if not 1 <= value <= self.settings.max_limit:
            raise InvalidQuery("limit", limit, message=f"limit must be between 1 and {self.settings.max_limit}")
        return value

    def _cached(self, scope: str, parts: Tuple[Any, ...], load, fresh: bool) -> NewsResult:
        try:
            key = make_cache_key(scope, *parts)
            entry, cached = self.cache.get_or_load(key, load, fresh=fresh)
        except SportsNewsError:
            raise
        except Exception as exc:
            logger.error("Aggregation for %s%r failed: %s", scope, parts, exc, exc_info=True)
            raise InternalAggregationFailure(f"aggregation failed for {scope}") from exc
        return _to_result(entry, cached)

    def _aggregate(
        self,
        sources: Sequence[FeedSource],
        sport: str,
        limit: int,
        per_feed_limit: Optional[int] = None,
    ) -> List[Article]:
        now = datetime.now(timezone.utc)
        width = max(1, self.settings.batch_size)
        collected: List[Article] = []

        if not sources:
            logger.info("No feeds configured for sport=%s", sport)
            return []

        for start in range(0, len(sources), width):
            batch = sources[start:start + width]
            # one pool per batch: a feed that outlived its deadline keeps its
            # thread but never blocks the next batch or the response
            executor = ThreadPoolExecutor(max_workers=len(batch), thread_name_prefix="feed-fetch")
            try:
                for articles in self._run_batch(executor, batch, sport, now, per_feed_limit):
                    collected.extend(articles)
            finally:
                executor.shutdown(wait=False, cancel_futures=True)

        unique = dedupe(collected)
        ordered = sort_by_recency(unique)
        logger.info(
            "Aggregated %d articles (%d unique) from %d feeds for sport=%s",
            len(collected),
            len(unique),
            len(sources),
            sport,
        )
        return ordered[:limit]

    def _run_batch(
        self,
        executor: ThreadPoolExecutor,
        batch: Sequence[FeedSource],
        sport: str,
        now: datetime,
        per_feed_limit: Optional[int],
    ) -> List[List[Article]]:
        futures = [
            (source, executor.submit(self._fetch_source, source, sport, now, per_feed_limit))
            for source in batch
        ]
        deadline = time.monotonic() + self.settings.fetch_timeout
        results: List[List[Article]] = []
        statuses: List[HealthStatus] = []
        for source, future in futures:
            remaining = max(0.0, deadline - time.monotonic())
            try:
                articles, status = future.result(timeout=remaining)
            except FutureTimeout:
                future.cancel()
                logger.warning("Feed %s (%s) timed out after %ss", source.name, redact_url(source.url), self.settings.fetch_timeout)
                articles, status = [], _failed(source, "timed out")
            except Exception as exc:  # pragma: no cover - safety net
                logger.error("Feed %s failed unexpectedly: %s", source.name, exc, exc_info=True)
                articles, status = [], _failed(source, str(exc))
            results.append(articles)
            statuses.append(status)

        with self._health_lock:
            for status in statuses:
                self._health[status.name] = status
        return results

    def _fetch_source(
        self,
        source: FeedSource,
        sport: str,
        now: datetime,
        per_feed_limit: Optional[int],
    ) -> Tuple[List[Article], HealthStatus]:
        start = time.monotonic()
        try:
            items = self.fetcher.fetch(source.url)
        except FeedUnavailable as exc:
            logger.warning("Feed %s unavailable: %s", source.name, exc.reason)
            return [], _failed(source, exc.reason, latency_ms=(time.monotonic() - start) * 1000)

        if per_feed_limit:
            items = items[:per_feed_limit]

        articles: List[Article] = []
        for raw in items:
            try:
                articles.append(self.normalizer.normalize(raw, source, sport=sport, now=now))
            except ValueError as exc:
                logger.debug("Dropping item from %s: %s", source.name, exc)

        return articles, HealthStatus(
            name=source.name,
            url=redact_url(source.url),
            healthy=True,
            last_success=now,
            items_last_fetch=len(articles),
            latency_ms=(time.monotonic() - start) * 1000,
        )


def _failed(source: FeedSource, reason: str, latency_ms: Optional[float] = None) -> HealthStatus:
    return HealthStatus(
        name=source.name,
        url=redact_url(source.url),
        healthy=False,
        last_error=reason,
        latency_ms=latency_ms,
    )


def _to_result(entry: CacheEntry, cached: bool) -> NewsResult:
    return NewsResult(
        articles=list(entry.articles),
        cached=cached,
        last_updated=datetime.fromtimestamp(entry.stored_at, tz=timezone.utc),
    )
