"""
Title-fingerprint deduplication.
"""
from __future__ import annotations

import re
from typing import Callable, Iterable, List, TypeVar

from sportsnews.models import Article

T = TypeVar("T")

NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
WHITESPACE_RE = re.compile(r"\s+")


def fingerprint(title: str) -> str:
    lowered = (title or "").lower()
    return WHITESPACE_RE.sub(" ", NON_ALNUM_RE.sub("", lowered)).strip()


def dedupe_by_key(items: Iterable[T], key_fn: Callable[[T], object]) -> List[T]:
    seen = set()
    result: List[T] = []
    for item in items:
        key = key_fn(item)
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def dedupe(articles: Iterable[Article]) -> List[Article]:
    """Keep the first article for every title fingerprint, preserving order."""
    return dedupe_by_key(articles, key_fn=lambda article: fingerprint(article.title))
