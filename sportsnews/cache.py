"""
TTL cache for computed article lists, with a single-flight guard.

- Entries are replaced wholesale and never mutated in place
- The clock is injected so tests control time
- Concurrent misses on one key share a single in-flight computation
"""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from sportsnews.models import Article

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    key: str
    articles: Tuple[Article, ...]
    stored_at: float


def make_cache_key(scope: str, *parts: object) -> str:
    """
    Deterministic key from a scope plus its parameters; ``None`` renders as ``-``.
    Raises ValueError on empty scopes and non-positive integer limits.
    """
    if not scope or ":" in scope:
        raise ValueError(f"invalid cache scope {scope!r}")
    rendered = []
    for part in parts:
        if part is None:
            rendered.append("-")
        elif isinstance(part, bool):
            raise ValueError("booleans are not valid cache key parts")
        elif isinstance(part, int):
            if part <= 0:
                raise ValueError(f"cache key limit must be positive, got {part}")
            rendered.append(str(part))
        else:
            text = str(part).strip().lower()
            if not text or ":" in text:
                raise ValueError(f"invalid cache key part {part!r}")
            rendered.append(text)
    return ":".join([scope, *rendered])


class ArticleCache:
    def __init__(self, ttl_seconds: float = 900, clock: Optional[Clock] = None) -> None:
        self.ttl_seconds = ttl_seconds
        self.clock: Clock = clock or time.time
        self._lock = threading.Lock()
        self._entries: Dict[str, CacheEntry] = {}
        self._inflight: Dict[str, Future] = {}

    def get(self, key: str) -> Optional[CacheEntry]:
        now = self.clock()
        with self._lock:
            return self._lookup(key, now)

    def _lookup(self, key: str, now: float) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if now - entry.stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return entry

    def put(self, key: str, articles: List[Article]) -> CacheEntry:
        entry = CacheEntry(key=key, articles=tuple(articles), stored_at=self.clock())
        with self._lock:
            self._entries[key] = entry
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
        logger.info("Article cache cleared")

    def get_or_load(
        self,
        key: str,
        loader: Callable[[], List[Article]],
        *,
        fresh: bool = False,
    ) -> Tuple[CacheEntry, bool]:
        """
        Return ``(entry, cached)``. On a miss (or when ``fresh``) run ``loader``
        unless another thread is already loading the same key, in which case
        wait for that result. Loader errors propagate to every waiter and
        nothing is stored.
        """
        with self._lock:
            if not fresh:
                entry = self._lookup(key, self.clock())
                if entry is not None:
                    return entry, True
            future = self._inflight.get(key)
            leader = future is None
            if leader:
                future = Future()
                self._inflight[key] = future

        if not leader:
            logger.debug("Joining in-flight load for %s", key)
            return future.result(), False

        try:
            entry = self.put(key, loader())
        except BaseException as exc:
            future.set_exception(exc)
            raise
        else:
            future.set_result(entry)
            return entry, False
        finally:
            with self._lock:
                self._inflight.pop(key, None)

    def snapshot(self) -> Dict[str, object]:
        """Lightweight view for status endpoints without payload content."""
        now = self.clock()
        with self._lock:
            entries = [
                {"key": key, "age_seconds": round(now - entry.stored_at, 2), "articles": len(entry.articles)}
                for key, entry in self._entries.items()
                if now - entry.stored_at < self.ttl_seconds
            ]
            inflight = sorted(self._inflight)
        return {
            "ttl_seconds": self.ttl_seconds,
            "size": len(entries),
            "entries": entries,
            "in_flight": inflight,
        }
