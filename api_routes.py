"""API routes for the sports news service."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from flask import jsonify, request

from sportsnews.errors import InvalidQuery
from sportsnews.models import GENERAL, Article
from sportsnews.pipeline import NewsPipeline
from sportsnews.status import build_status
from sportsnews.trending import TrendingAggregator

logger = logging.getLogger("sportsnews.api")

TRUE_VALUES = {"1", "true", "yes", "on"}


def _articles(articles: List[Article]) -> List[Dict[str, Any]]:
    return [article.to_dict() for article in articles]


def _flag(name: str) -> bool:
    return (request.args.get(name) or "").strip().lower() in TRUE_VALUES


def _invalid(exc: InvalidQuery):
    payload: Dict[str, Any] = {"success": False, "message": str(exc)}
    if exc.valid_values:
        payload["validValues"] = exc.valid_values
    return jsonify(payload), 400


def _failure(message: str, exc: Exception, debug: bool):
    logger.error("%s: %s", message, exc, exc_info=True)
    payload: Dict[str, Any] = {"success": False, "message": message}
    if debug:
        payload["error"] = str(exc)
    return jsonify(payload), 500


def register_routes(app, pipeline: NewsPipeline, trending: Optional[TrendingAggregator] = None, debug: bool = False):
    """Register all news routes with the Flask app.

    Args:
        app: Flask app instance.
        pipeline: NewsPipeline serving every request.
        trending: TrendingAggregator; built from the pipeline when omitted.
        debug: Include exception detail in 500 responses.
    """
    trending = trending or TrendingAggregator(pipeline)

    @app.route("/news", methods=["GET"])
    def get_news():
        try:
            sport = pipeline.registry.validate_sport(request.args.get("sport"))
            result = pipeline.get_news(
                sport,
                category=request.args.get("category"),
                limit=request.args.get("limit"),
                fresh=_flag("fresh"),
            )
        except InvalidQuery as exc:
            return _invalid(exc)
        except Exception as exc:
            return _failure("Error fetching news", exc, debug)

        return jsonify(
            {
                "success": True,
                "cached": result.cached,
                "count": len(result.articles),
                "data": {
                    "articles": _articles(result.articles),
                    "sport": sport,
                    "lastUpdated": result.last_updated.isoformat(),
                },
            }
        )

    @app.route("/news/trending", methods=["GET"])
    def get_trending_news():
        try:
            result = pipeline.get_trending_articles(limit=request.args.get("limit", 15), fresh=_flag("fresh"))
        except InvalidQuery as exc:
            return _invalid(exc)
        except Exception as exc:
            return _failure("Error fetching trending news", exc, debug)

        return jsonify(
            {
                "success": True,
                "cached": result.cached,
                "count": len(result.articles),
                "data": {
                    "articles": _articles(result.articles),
                    "lastUpdated": result.last_updated.isoformat(),
                },
            }
        )

    @app.route("/news/trending/topics", methods=["GET"])
    def get_trending_topics():
        try:
            topics = trending.trending(request.args.get("sport", GENERAL), limit=request.args.get("limit", 10))
        except InvalidQuery as exc:
            return _invalid(exc)
        except Exception as exc:
            return _failure("Error computing trending topics", exc, debug)

        return jsonify({"success": True, "count": len(topics), "data": {"topics": [topic.to_dict() for topic in topics]}})

    @app.route("/news/team/<team>", methods=["GET"])
    def get_team_news(team: str):
        try:
            articles = pipeline.get_team_news(team, request.args.get("sport", GENERAL), limit=request.args.get("limit", 10))
        except InvalidQuery as exc:
            return _invalid(exc)
        except Exception as exc:
            return _failure("Error fetching team news", exc, debug)

        return jsonify({"success": True, "count": len(articles), "data": {"articles": _articles(articles), "team": team}})

    @app.route("/news/breaking", methods=["GET"])
    def get_breaking_news():
        try:
            hours = float(request.args.get("hours", 2))
        except ValueError:
            return _invalid(InvalidQuery("hours", request.args.get("hours"), message="hours must be a number"))
        try:
            articles = pipeline.get_breaking_news(request.args.get("sport", GENERAL), hours=hours)
        except InvalidQuery as exc:
            return _invalid(exc)
        except Exception as exc:
            return _failure("Error fetching breaking news", exc, debug)

        return jsonify({"success": True, "count": len(articles), "data": {"articles": _articles(articles)}})

    @app.route("/news/cache", methods=["DELETE"])
    def clear_cache():
        try:
            pipeline.clear_cache()
        except Exception as exc:  # pragma: no cover
            return _failure("Error clearing cache", exc, debug)
        return jsonify({"success": True, "message": "News cache cleared successfully"})

    @app.route("/news/sources", methods=["GET"])
    def get_sources():
        return jsonify({"success": True, "data": pipeline.registry.summary()})

    @app.route("/news/status", methods=["GET"])
    def get_status():
        try:
            return jsonify({"success": True, "data": build_status(pipeline)})
        except Exception as exc:
            logger.error("Status check failed: %s", exc, exc_info=True)
            return jsonify({
                "success": False,
                "message": "Failed to retrieve status",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }), 500
