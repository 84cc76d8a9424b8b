"""
Turns a RawItem into a canonical Article.
"""
from __future__ import annotations

import hashlib
import re
from datetime import datetime, timezone
from typing import Optional, Sequence

from feeds.schemas.models import RawItem
from sportsnews.categorizer import Categorizer
from sportsnews.models import Article, ArticleSource, FeedSource

TAG_RE = re.compile(r"<[^>]*>")
IMG_SRC_RE = re.compile(r'<img[^>]+src="([^">]+)"')
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&nbsp;": " ",
}
ENTITY_RE = re.compile("|".join(re.escape(entity) for entity in ENTITIES))

ELLIPSIS = "..."


def make_digest(parts: Sequence[Optional[str]]) -> str:
    joined = "|".join(part or "" for part in parts)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


def make_article_id(raw: RawItem) -> str:
    """SHA-256 of the link (or guid); title|published when neither exists."""
    anchor = raw.link or raw.guid
    if anchor:
        return make_digest([anchor])[:16]
    published = raw.published.isoformat() if raw.published else raw.published_raw
    return make_digest([raw.title, published])[:16]


def clean_html(text: Optional[str]) -> str:
    if not text:
        return ""
    stripped = TAG_RE.sub("", text)
    # single pass, so "&amp;lt;" becomes "&lt;" and not "<"
    decoded = ENTITY_RE.sub(lambda match: ENTITIES[match.group(0)], stripped)
    return decoded.strip()


def truncate(text: str, limit: Optional[int]) -> str:
    if not limit or len(text) <= limit:
        return text
    return text[:limit] + ELLIPSIS


def extract_image(raw: RawItem) -> Optional[str]:
    if raw.media_content:
        return raw.media_content
    if raw.media_thumbnail:
        return raw.media_thumbnail
    for enclosure in raw.enclosures:
        if enclosure.is_image:
            return enclosure.url
    for body in (raw.content, raw.description):
        if body:
            match = IMG_SRC_RE.search(body)
            if match:
                return match.group(1)
    return None


def summarize(description: str) -> str:
    if not description:
        return ""
    first = SENTENCE_SPLIT_RE.split(description, maxsplit=1)[0]
    if len(first) > 20:
        return first.strip() + "."
    if len(description) > 100:
        return description[:100] + ELLIPSIS
    return description


class Normalizer:
    def __init__(self, categorizer: Categorizer, description_limit: Optional[int] = 300) -> None:
        self.categorizer = categorizer
        self.description_limit = description_limit

    def normalize(
        self,
        raw: RawItem,
        source: FeedSource,
        sport: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Article:
        """
        Build an Article from one feed entry.

        ``sport`` is the sport the caller asked for (defaults to the feed's);
        for ``general`` the Categorizer classifies the article itself.
        ``now`` stands in for a missing or unreadable publish date.
        Raises ValueError when the entry has no usable title.
        """
        title = clean_html(raw.title)
        if not title:
            raise ValueError("feed item has no title")

        full_description = clean_html(raw.description or raw.content)
        description = truncate(full_description, self.description_limit)
        content = clean_html(raw.content or raw.description)

        published_at = raw.published or now or datetime.now(timezone.utc)
        if published_at.tzinfo is None:
            published_at = published_at.replace(tzinfo=timezone.utc)

        target = (sport or source.sport).lower()
        tags = self.categorizer.tags_for(title, full_description, target)

        return Article(
            id=make_article_id(raw),
            title=title,
            description=description,
            content=content,
            url=raw.link,
            author=raw.author or source.name,
            published_at=published_at,
            source=ArticleSource(name=source.name, url=source.url, category=source.category, sport=source.sport),
            image=extract_image(raw),
            tags=tags,
            summary=summarize(full_description),
            dated=raw.published is not None,
        )
