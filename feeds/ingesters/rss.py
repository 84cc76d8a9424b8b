"""
Maps feedparser output into the parser-neutral RawItem shape.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import feedparser

from feeds.schemas.models import Enclosure, ParsedFeed, RawItem

logger = logging.getLogger(__name__)


class FeedParseError(ValueError):
    """Raised when a payload cannot be read as RSS/Atom."""


def parse_feed(feed_content: bytes) -> ParsedFeed:
    feed = feedparser.parse(feed_content)
    entries = getattr(feed, "entries", None) or []
    if getattr(feed, "bozo", False) and not entries:
        reason = getattr(feed, "bozo_exception", None)
        raise FeedParseError(f"malformed feed: {reason}")
    if getattr(feed, "bozo", False):
        logger.debug("Feed parsed leniently: %s", getattr(feed, "bozo_exception", None))

    items: List[RawItem] = []
    for entry in entries:
        try:
            items.append(to_raw_item(entry))
        except ValueError as exc:
            logger.debug("Skipping unreadable feed entry: %s", exc)

    channel = getattr(feed, "feed", None)
    return ParsedFeed(title=_attr(channel, "title"), link=_attr(channel, "link"), items=items)


def to_raw_item(entry: Any) -> RawItem:
    content_blocks = _attr(entry, "content") or []
    content = None
    for block in content_blocks:
        value = _attr(block, "value")
        if value:
            content = value
            break

    return RawItem(
        title=_attr(entry, "title"),
        link=_attr(entry, "link"),
        guid=_attr(entry, "id"),
        published=_parse_datetime(_attr(entry, "published_parsed") or _attr(entry, "updated_parsed")),
        published_raw=_attr(entry, "published") or _attr(entry, "updated"),
        description=_attr(entry, "summary") or _attr(entry, "description"),
        content=content,
        author=_attr(entry, "author") or _attr(entry, "dc_creator"),
        media_content=_first_url(_attr(entry, "media_content")),
        media_thumbnail=_first_url(_attr(entry, "media_thumbnail")),
        enclosures=_enclosures(_attr(entry, "enclosures")),
        categories=[term for term in (_attr(tag, "term") for tag in _attr(entry, "tags") or []) if term],
    )


def _attr(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _first_url(media: Any) -> Optional[str]:
    for entry in media or []:
        url = _attr(entry, "url")
        if url:
            return url
    return None


def _enclosures(raw: Any) -> List[Enclosure]:
    enclosures: List[Enclosure] = []
    for entry in raw or []:
        url = _attr(entry, "href") or _attr(entry, "url")
        if url:
            enclosures.append(Enclosure(url=url, type=_attr(entry, "type")))
    return enclosures


def _parse_datetime(struct_time) -> Optional[datetime]:
    if not struct_time:
        return None
    try:
        return datetime(*struct_time[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None
