"""
Thin HTTP layer for feed downloads: one attempt, bounded by a timeout.
"""
from __future__ import annotations

import threading
import time
from typing import Dict, Optional
from urllib.parse import urlsplit, urlunsplit

import requests

DEFAULT_USER_AGENT = "SportsNewsAggregator/1.0 (+https://example.com/bot)"


class HttpFetcher:
    """
    Wrapper over requests.Session with polite per-domain spacing.
    Raises requests exceptions; callers decide how to recover.
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: float = 10.0,
        min_delay: float = 0.0,
    ) -> None:
        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": user_agent or DEFAULT_USER_AGENT,
                "Accept": "application/rss+xml,application/atom+xml,application/xml;q=0.9,text/xml;q=0.8,*/*;q=0.5",
                "Accept-Language": "en-US,en;q=0.8",
            }
        )
        self.timeout = timeout
        self.min_delay = min_delay
        self._last_hit: Dict[str, float] = {}
        self._lock = threading.Lock()

    def fetch(self, url: str) -> bytes:
        self._respect_delay(url)
        response = self.session.get(url, timeout=self.timeout)
        if not 200 <= response.status_code < 300:
            raise requests.HTTPError(f"HTTP {response.status_code}", response=response)
        return response.content

    def _respect_delay(self, url: str) -> None:
        if self.min_delay <= 0:
            return
        domain = urlsplit(url).netloc or url
        with self._lock:
            last = self._last_hit.get(domain)
            now = time.monotonic()
            wait = self.min_delay - (now - last) if last else 0.0
            self._last_hit[domain] = now + max(wait, 0.0)
        if wait > 0:
            time.sleep(wait)


def redact_url(url: str) -> str:
    """Drop query string and fragment so tokens never reach the logs."""
    if not url:
        return url
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
