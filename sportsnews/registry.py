"""
Static table of feed sources, keyed by sport.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sportsnews.errors import InvalidQuery
from sportsnews.models import GENERAL, FeedSource

logger = logging.getLogger(__name__)


class FeedRegistry:
    def __init__(self, sources: Iterable[FeedSource]) -> None:
        self._by_sport: Dict[str, List[FeedSource]] = {GENERAL: []}
        for source in sources:
            self._by_sport.setdefault(source.sport, []).append(source)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "FeedRegistry":
        sources: List[FeedSource] = []
        for sport, entries in (config.get("feeds") or {}).items():
            for entry in entries or []:
                if not isinstance(entry, dict) or not entry.get("url") or not entry.get("name"):
                    logger.warning("Skipping malformed feed entry under %s: %r", sport, entry)
                    continue
                sources.append(
                    FeedSource(
                        name=str(entry["name"]),
                        url=str(entry["url"]),
                        sport=str(sport).lower(),
                        category=str(entry.get("category") or "news").lower(),
                    )
                )
        if not sources:
            logger.warning("Feed registry is empty; every query will return no articles")
        return cls(sources)

    def sports(self) -> List[str]:
        return list(self._by_sport.keys())

    def categories(self) -> List[str]:
        return sorted({source.category for sources in self._by_sport.values() for source in sources})

    def resolve(self, sport: str, category: Optional[str] = None) -> List[FeedSource]:
        feeds = self._by_sport.get((sport or "").lower())
        if feeds is None:
            feeds = self._by_sport[GENERAL]
        if category:
            feeds = [feed for feed in feeds if feed.category == category]
        return list(feeds)

    def all_sources(self) -> List[FeedSource]:
        """Every configured source once, first sport listing wins for shared URLs."""
        seen = set()
        unique: List[FeedSource] = []
        for sources in self._by_sport.values():
            for source in sources:
                if source.url in seen:
                    continue
                seen.add(source.url)
                unique.append(source)
        return unique

    def validate_sport(self, sport: Optional[str]) -> str:
        value = (sport or GENERAL).strip().lower()
        if value not in self._by_sport:
            raise InvalidQuery("sport", sport, self.sports())
        return value

    def validate_category(self, category: Optional[str]) -> Optional[str]:
        if category is None or not category.strip():
            return None
        value = category.strip().lower()
        valid = self.categories()
        if value not in valid:
            raise InvalidQuery("category", category, valid)
        return value

    def summary(self) -> Dict[str, Any]:
        sources = [
            {
                "sport": sport,
                "feeds": len(feeds),
                "sources": [{"name": feed.name, "url": feed.url, "category": feed.category} for feed in feeds],
            }
            for sport, feeds in self._by_sport.items()
        ]
        return {
            "sources": sources,
            "totalFeeds": sum(entry["feeds"] for entry in sources),
        }
