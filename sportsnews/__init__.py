"""
Public API for the sports news aggregation engine.
"""
from __future__ import annotations

from typing import List, Optional

from sportsnews.models import GENERAL, Article, NewsResult, TrendingTopic
from sportsnews.pipeline import NewsPipeline
from sportsnews.settings import NewsSettings, load_settings
from sportsnews.status import build_status
from sportsnews.trending import TrendingAggregator

SETTINGS: NewsSettings = load_settings()
_pipeline = NewsPipeline(SETTINGS)
_trending = TrendingAggregator(_pipeline)


def get_pipeline() -> NewsPipeline:
    return _pipeline


def get_news(sport: str = GENERAL, category: Optional[str] = None, limit: Optional[int] = None, fresh: bool = False) -> NewsResult:
    return _pipeline.get_news(sport, category=category, limit=limit, fresh=fresh)


def get_trending_topics(sport: str = GENERAL, limit: int = 10) -> List[TrendingTopic]:
    return _trending.trending(sport, limit)


def get_pipeline_status():
    """Expose a structured status payload for health dashboards."""
    return build_status(_pipeline)


__all__ = [
    "Article",
    "NewsPipeline",
    "NewsResult",
    "SETTINGS",
    "TrendingAggregator",
    "TrendingTopic",
    "get_news",
    "get_pipeline",
    "get_pipeline_status",
    "get_trending_topics",
]
