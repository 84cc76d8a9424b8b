"""
APScheduler job that keeps the per-sport result sets warm.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import BaseScheduler

from sportsnews.errors import SportsNewsError
from sportsnews.pipeline import NewsPipeline

logger = logging.getLogger(__name__)


def warm_cache(pipeline: NewsPipeline, sports: Optional[Iterable[str]] = None) -> int:
    """Recompute the default result set of every sport; returns articles loaded."""
    total = 0
    for sport in sports or pipeline.registry.sports():
        try:
            result = pipeline.get_news(sport, fresh=True)
        except SportsNewsError as exc:
            logger.error("Cache warm-up for %s failed: %s", sport, exc)
            continue
        total += len(result.articles)
    logger.info("Cache warm-up refreshed %d articles", total)
    return total


def schedule_cache_warmer(scheduler: BaseScheduler, pipeline: NewsPipeline, interval_minutes: int) -> None:
    scheduler.add_job(
        warm_cache,
        "interval",
        args=[pipeline],
        minutes=interval_minutes,
        id="warm_news_cache",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )


def start_cache_warmer(pipeline: NewsPipeline, interval_minutes: int) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(timezone="UTC")
    schedule_cache_warmer(scheduler, pipeline, interval_minutes)
    scheduler.start()
    logger.info("Cache warmer scheduled every %d minutes", interval_minutes)
    return scheduler
