"""
Tag-frequency ranking over a large recent article pool.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from sportsnews.models import GENERAL, Article, TrendingTopic
from sportsnews.pipeline import NewsPipeline

logger = logging.getLogger(__name__)

SAMPLES_PER_TOPIC = 3


def rank_topics(articles: Sequence[Article], limit: int, samples: int = SAMPLES_PER_TOPIC) -> List[TrendingTopic]:
    """
    Count tag occurrences and rank them by count, descending. Equal counts keep
    the order in which each tag was first seen while walking ``articles``.
    """
    counts: Dict[str, int] = {}
    first_seen: Dict[str, int] = {}
    examples: Dict[str, List[Article]] = {}
    for article in articles:
        for tag in dict.fromkeys(article.tags):
            if tag not in counts:
                counts[tag] = 0
                first_seen[tag] = len(first_seen)
                examples[tag] = []
            counts[tag] += 1
            if len(examples[tag]) < samples:
                examples[tag].append(article)

    ranked = sorted(counts, key=lambda tag: (-counts[tag], first_seen[tag]))
    return [TrendingTopic(topic=tag, count=counts[tag], articles=examples[tag]) for tag in ranked[:limit]]


class TrendingAggregator:
    def __init__(self, pipeline: NewsPipeline, pool_limit: Optional[int] = None) -> None:
        self.pipeline = pipeline
        self.pool_limit = pool_limit or pipeline.settings.trending_pool_limit

    def trending(self, sport: Optional[str] = GENERAL, limit: int = 10) -> List[TrendingTopic]:
        limit = self.pipeline.validate_limit(limit)
        pool = self.pipeline.fetch_articles(sport, None, self.pool_limit).articles
        topics = rank_topics(pool, limit)
        logger.debug("Ranked %d topics from a pool of %d articles", len(topics), len(pool))
        return topics
