"""
Core data structures shared by the sports news engine.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


GENERAL = "general"


@dataclass(frozen=True)
class FeedSource:
    name: str
    url: str
    sport: str
    category: str


@dataclass(frozen=True)
class ArticleSource:
    """Back-reference to the feed an article came from."""

    name: str
    url: Optional[str]
    category: str
    sport: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "category": self.category,
            "sport": self.sport,
        }


@dataclass
class Article:
    """
    Canonical representation of one news item after cleaning and enrichment.
    """

    id: str
    title: str
    description: str
    content: str
    url: Optional[str]
    author: Optional[str]
    published_at: datetime
    source: ArticleSource
    image: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    summary: str = ""
    # False when published_at is a stand-in for a missing or unreadable date
    dated: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "url": self.url,
            "author": self.author,
            "publishedAt": self.published_at.isoformat(),
            "source": self.source.to_dict(),
            "image": self.image,
            "tags": list(self.tags),
            "summary": self.summary,
        }


@dataclass
class HealthStatus:
    name: str
    healthy: bool
    url: Optional[str] = None
    last_error: Optional[str] = None
    last_success: Optional[datetime] = None
    items_last_fetch: int = 0
    latency_ms: Optional[float] = None


@dataclass
class NewsResult:
    articles: List[Article]
    cached: bool
    last_updated: datetime


@dataclass
class TrendingTopic:
    topic: str
    count: int
    articles: List[Article] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topic": self.topic,
            "count": self.count,
            "articles": [article.to_dict() for article in self.articles],
        }
