"""
Keyword heuristics for article tags and whole-sport classification.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from sportsnews.models import GENERAL


def _keyword_table(raw: Any) -> Dict[str, List[str]]:
    table: Dict[str, List[str]] = {}
    for sport, words in (raw or {}).items():
        table[str(sport).lower()] = [str(word).lower() for word in words or []]
    return table


class Categorizer:
    def __init__(
        self,
        sport_keywords: Optional[Mapping[str, Sequence[str]]] = None,
        general_keywords: Optional[Sequence[str]] = None,
        sport_signals: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> None:
        self.sport_keywords = _keyword_table(sport_keywords)
        self.general_keywords = [word.lower() for word in general_keywords or []]
        # dict order is the classification precedence
        self.sport_signals = _keyword_table(sport_signals)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "Categorizer":
        return cls(
            sport_keywords=config.get("keywords"),
            general_keywords=config.get("general_keywords"),
            sport_signals=config.get("sport_signals"),
        )

    def categorize(self, title: str, body: str, sport: str) -> List[str]:
        sport = sport.lower()
        text = f"{title} {body}".lower()
        tags = [sport]
        for keyword in self.sport_keywords.get(sport, []) + self.general_keywords:
            if keyword in text and keyword not in tags:
                tags.append(keyword)
        return tags

    def classify(self, title: str, snippet: str) -> str:
        text = f"{title} {snippet}".lower()
        for sport, signals in self.sport_signals.items():
            if any(signal in text for signal in signals):
                return sport
        return GENERAL

    def tags_for(self, title: str, body: str, sport: str) -> List[str]:
        """Tags for a known sport, or for the classified sport when ``general``."""
        if sport.lower() == GENERAL:
            sport = self.classify(title, body)
        return self.categorize(title, body, sport)
