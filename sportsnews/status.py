"""
Status/health payload for the news engine, shaped for API consumption.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from sportsnews.models import HealthStatus
from sportsnews.pipeline import NewsPipeline


def _health_to_dict(status: HealthStatus) -> Dict[str, Any]:
    return {
        "name": status.name,
        "url": status.url,
        "healthy": status.healthy,
        "last_error": status.last_error,
        "last_success": status.last_success.isoformat() if status.last_success else None,
        "items_last_fetch": status.items_last_fetch,
        "latency_ms": round(status.latency_ms, 1) if status.latency_ms is not None else None,
    }


def build_status(pipeline: NewsPipeline) -> Dict[str, Any]:
    settings = pipeline.settings
    health = [_health_to_dict(entry) for entry in pipeline.get_health()]
    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "pipeline": {
            "health": health,
            "feeds_seen": len(health),
            "healthy_feeds": sum(1 for entry in health if entry["healthy"]),
            "sports": pipeline.registry.sports(),
        },
        "cache": pipeline.cache.snapshot(),
        "config": {
            "cache_ttl_seconds": settings.cache_ttl_seconds,
            "batch_size": settings.batch_size,
            "fetch_timeout": settings.fetch_timeout,
            "description_limit": settings.description_limit,
            "default_limit": settings.default_limit,
            "max_limit": settings.max_limit,
            "sources_path": str(settings.sources_path),
        },
    }
