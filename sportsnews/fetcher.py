"""
Downloads one feed and hands back parser-neutral RawItems.
"""
from __future__ import annotations

import logging
from typing import List, Optional

import requests

from feeds.infra.http import HttpFetcher, redact_url
from feeds.ingesters.rss import FeedParseError, parse_feed
from feeds.schemas.models import RawItem
from sportsnews.errors import FeedUnavailable

logger = logging.getLogger(__name__)


class FeedFetcher:
    """
    Stateless apart from the shared HTTP session; safe to call from several
    threads at once. No retries happen here.
    """

    def __init__(self, http: Optional[HttpFetcher] = None, timeout: float = 10.0, user_agent: Optional[str] = None) -> None:
        self.http = http or HttpFetcher(user_agent=user_agent, timeout=timeout)

    def fetch(self, url: str) -> List[RawItem]:
        try:
            payload = self.http.fetch(url)
        except requests.Timeout as exc:
            raise FeedUnavailable(redact_url(url), f"timed out: {exc}") from exc
        except requests.RequestException as exc:
            raise FeedUnavailable(redact_url(url), str(exc)) from exc

        try:
            parsed = parse_feed(payload)
        except FeedParseError as exc:
            raise FeedUnavailable(redact_url(url), str(exc)) from exc

        logger.debug("Parsed %d items from %s", len(parsed.items), redact_url(url))
        return parsed.items
