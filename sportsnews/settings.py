"""
Centralised settings for the sports news engine (env-first, code-light).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_SOURCES_PATH = Path(__file__).resolve().parent / "sources.yaml"


@dataclass
class NewsSettings:
    cache_ttl_seconds: int = 900
    default_limit: int = 20
    max_limit: int = 100
    batch_size: int = 3
    fetch_timeout: float = 10.0
    # 0 keeps the full cleaned description
    description_limit: int = 300
    trending_pool_limit: int = 100
    trending_per_feed: int = 5
    sources_path: Path = DEFAULT_SOURCES_PATH
    user_agent: Optional[str] = None
    debug: bool = False
    warm_interval_minutes: int = 0


def _int_from_env(key: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int value for %s=%s; using default %s", key, raw, default)
        return default
    if value < minimum:
        logger.warning("Value for %s=%s below %s; using default %s", key, raw, minimum, default)
        return default
    return value


def _bool_from_env(key: str, default: bool = False) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> NewsSettings:
    sources_env = os.getenv("SPORTSNEWS_SOURCES_PATH")
    default_limit = _int_from_env("SPORTSNEWS_DEFAULT_LIMIT", 20)
    max_limit = _int_from_env("SPORTSNEWS_MAX_LIMIT", 100)
    if default_limit > max_limit:
        logger.warning("Default limit %s exceeds max limit %s; using %s", default_limit, max_limit, max_limit)
        default_limit = max_limit
    return NewsSettings(
        cache_ttl_seconds=_int_from_env("SPORTSNEWS_CACHE_TTL", 900),
        default_limit=default_limit,
        max_limit=max_limit,
        batch_size=_int_from_env("SPORTSNEWS_BATCH_SIZE", 3),
        fetch_timeout=float(_int_from_env("SPORTSNEWS_FETCH_TIMEOUT", 10)),
        description_limit=_int_from_env("SPORTSNEWS_DESCRIPTION_LIMIT", 300, minimum=0),
        trending_pool_limit=_int_from_env("SPORTSNEWS_TRENDING_POOL", 100),
        trending_per_feed=_int_from_env("SPORTSNEWS_TRENDING_PER_FEED", 5),
        sources_path=Path(sources_env) if sources_env else DEFAULT_SOURCES_PATH,
        user_agent=os.getenv("SPORTSNEWS_USER_AGENT") or None,
        debug=_bool_from_env("SPORTSNEWS_DEBUG") or os.getenv("FLASK_ENV") == "development",
        warm_interval_minutes=_int_from_env("SPORTSNEWS_WARM_INTERVAL", 0, minimum=0),
    )
