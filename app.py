"""Main application module for the sports news service."""
from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

# Load environment variables before the engine reads its settings
load_dotenv(os.getenv("SPORTSNEWS_DOTENV", ".env"))

from api_routes import register_routes  # noqa: E402
from sportsnews import SETTINGS, get_pipeline  # noqa: E402
from sportsnews.scheduler import start_cache_warmer  # noqa: E402
from sportsnews.trending import TrendingAggregator  # noqa: E402

PROJECT_ROOT = Path(__file__).resolve().parent
LOG_DIR = Path(os.getenv("SPORTSNEWS_LOG_DIR", PROJECT_ROOT / "logs"))
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Configure logging
logging.basicConfig(
    level=os.getenv("SPORTSNEWS_LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(LOG_DIR / "sportsnews.log"),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("sportsnews.app")

# Initialize Flask app
app = Flask(__name__)
CORS(app)

pipeline = get_pipeline()
register_routes(app, pipeline, TrendingAggregator(pipeline), debug=SETTINGS.debug)

warmer = None
if SETTINGS.warm_interval_minutes:
    warmer = start_cache_warmer(pipeline, SETTINGS.warm_interval_minutes)

logger.info(
    "Sports news service ready: %d sports, cache TTL %ss, batch width %d",
    len(pipeline.registry.sports()),
    SETTINGS.cache_ttl_seconds,
    SETTINGS.batch_size,
)

__all__ = ["app", "pipeline"]
