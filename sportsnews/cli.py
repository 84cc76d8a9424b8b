"""
Command line entry points for fetching news without the web service.
"""
from __future__ import annotations

import json
import logging

import click

from sportsnews.errors import SportsNewsError
from sportsnews.pipeline import NewsPipeline
from sportsnews.scheduler import warm_cache
from sportsnews.status import build_status
from sportsnews.trending import TrendingAggregator


def _echo(payload) -> None:
    click.echo(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log at DEBUG level.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    ctx.obj = NewsPipeline()


@cli.command()
@click.option("--sport", default="general", show_default=True)
@click.option("--category", default=None)
@click.option("--limit", default=10, show_default=True, type=int)
@click.pass_obj
def news(pipeline: NewsPipeline, sport: str, category: str, limit: int):
    """Print aggregated articles for one sport."""
    try:
        result = pipeline.get_news(sport, category=category, limit=limit)
    except SportsNewsError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo([article.to_dict() for article in result.articles])


@cli.command()
@click.option("--sport", default="general", show_default=True)
@click.option("--limit", default=10, show_default=True, type=int)
@click.pass_obj
def trending(pipeline: NewsPipeline, sport: str, limit: int):
    """Print the most frequent tags with sample headlines."""
    try:
        topics = TrendingAggregator(pipeline).trending(sport, limit)
    except SportsNewsError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo(
        [
            {"topic": topic.topic, "count": topic.count, "headlines": [article.title for article in topic.articles]}
            for topic in topics
        ]
    )


@cli.command()
@click.pass_obj
def sources(pipeline: NewsPipeline):
    """List configured feeds per sport."""
    _echo(pipeline.registry.summary())


@cli.command()
@click.pass_obj
def refresh(pipeline: NewsPipeline):
    """Fetch every sport once and report per-feed health."""
    total = warm_cache(pipeline)
    _echo({"articles": total, "feeds": build_status(pipeline)["pipeline"]["health"]})


if __name__ == "__main__":  # pragma: no cover
    cli()
