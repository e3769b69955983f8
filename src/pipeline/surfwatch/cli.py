"""Command-line interface for the SurfWatch pipeline."""

import json
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click
import structlog

from surfwatch.analytics.analyzer import ContentAnalyzer
from surfwatch.config import get_config, reload_config
from surfwatch.dashboard import build_dashboard_snapshot, build_map_data, build_station_risk_feed
from surfwatch.db.client import ApiClient
from surfwatch.db.seed import SeedStore
from surfwatch.risk.proximity import nearby_events
from surfwatch.risk.scoring import StationRiskScorer
from surfwatch.social.youtube import YouTubeClient, collect_subway_surfing_posts
from surfwatch.transit.stations import Station, StationDirectory

# Configure structlog for CLI output
import logging

logging.basicConfig(format="%(message)s", level=logging.INFO)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger()

SOURCE_CHOICE = click.Choice(["seed", "api"])


@contextmanager
def open_store(source: str) -> Iterator[Any]:
    """Open the monitoring data source named on the command line."""
    if source == "api":
        with ApiClient() as api:
            yield api
    else:
        yield SeedStore()


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


@click.group()
@click.option("--config-dir", type=click.Path(exists=True, path_type=Path), help="Configuration directory")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, config_dir: Path | None, verbose: bool) -> None:
    """SurfWatch subway surfing risk monitor."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if config_dir:
        reload_config(config_dir)

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.option("--source", type=SOURCE_CHOICE, default="seed", help="Where risk events come from")
@click.option("--radius-km", type=float, help="Proximity radius in km")
@click.option("--seed", type=int, help="Random seed for reproducible output")
@click.option("--limit", type=int, help="Only print the top N stations")
def stations(source: str, radius_km: float | None, seed: int | None, limit: int | None) -> None:
    """Rank all subway stations by assessed risk."""
    try:
        config = get_config()
        radius = radius_km if radius_km is not None else config.risk.proximity_radius_km

        directory = StationDirectory.from_config()
        station_list = directory.get_stations()
        station_source = directory.cache.source if directory.cache else "static"

        with open_store(source) as store:
            events = store.get_risk_events()

        payload = build_station_risk_feed(
            station_list,
            events,
            StationRiskScorer.from_config(seed),
            radius_km=radius,
            source=station_source,
        )
        if limit is not None:
            payload["stations"] = payload["stations"][:limit]

        _echo_json(payload)

    except Exception as e:
        logger.exception("Station assessment failed")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command("map-data")
@click.option("--source", type=SOURCE_CHOICE, default="seed", help="Where risk events come from")
@click.option("--radius-km", type=float, help="Proximity radius in km")
@click.option("--seed", type=int, help="Random seed for reproducible output")
def map_data(source: str, radius_km: float | None, seed: int | None) -> None:
    """Overlay risk events on the major hub stations."""
    try:
        radius = radius_km if radius_km is not None else get_config().risk.proximity_radius_km
        hubs = StationDirectory.from_config().get_hub_stations()

        with open_store(source) as store:
            events = store.get_risk_events()
            alerts = store.get_active_alerts()

        _echo_json(build_map_data(hubs, events, alerts, StationRiskScorer.from_config(seed), radius_km=radius))

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--lat", type=float, required=True, help="Latitude in degrees")
@click.option("--lon", type=float, required=True, help="Longitude in degrees")
@click.option("--radius-km", type=float, help="Proximity radius in km")
@click.option("--source", type=SOURCE_CHOICE, default="seed", help="Where risk events come from")
def nearby(lat: float, lon: float, radius_km: float | None, source: str) -> None:
    """List risk events near a coordinate."""
    try:
        radius = radius_km if radius_km is not None else get_config().risk.proximity_radius_km
        point = Station(id="query", name="Query point", latitude=lat, longitude=lon, borough="Unknown")

        with open_store(source) as store:
            events = store.get_risk_events()

        matches = nearby_events(point, events, radius)
        _echo_json({
            "latitude": lat,
            "longitude": lon,
            "radiusKm": radius,
            "events": [e.to_dict() for e in matches],
        })

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--source", type=SOURCE_CHOICE, default="seed", help="Where dashboard data comes from")
def dashboard(source: str) -> None:
    """Print every dashboard panel as one JSON document."""
    try:
        with open_store(source) as store:
            _echo_json(build_dashboard_snapshot(store))
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--content", required=True, help="Post text to classify")
@click.option("--platform", required=True, help="Platform the post came from")
@click.option("--sentiment", is_flag=True, help="Also run sentiment analysis")
def analyze(content: str, platform: str, sentiment: bool) -> None:
    """Classify a post for subway surfing risk."""
    analyzer = ContentAnalyzer()
    result = {"analysis": analyzer.analyze_content(content, platform).to_dict()}
    if sentiment:
        result["sentiment"] = analyzer.analyze_sentiment(content).to_dict()
    _echo_json(result)


@cli.command()
@click.option("--source", type=SOURCE_CHOICE, default="seed", help="Where dashboard data comes from")
@click.option("--predictions", is_flag=True, help="Also predict risk events for the next 48 hours")
def insights(source: str, predictions: bool) -> None:
    """Generate predictive insights from trends and the risk feed."""
    try:
        analyzer = ContentAnalyzer()
        with open_store(source) as store:
            trends = store.get_trend_data()
            feed = [i.to_dict() for i in store.get_recent_feed_items()]
            alerts = [a.to_dict() for a in store.get_active_alerts()] if predictions else []
            metrics = store.get_platform_metrics() if predictions else []

        result: dict[str, Any] = {
            "insights": [i.to_dict() for i in analyzer.generate_predictive_insights(trends, feed)],
        }
        if predictions:
            result["predictions"] = analyzer.predict_risk_events({
                "trends": trends,
                "alerts": alerts,
                "metrics": metrics,
                "riskFeed": feed,
            })
        _echo_json(result)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--query", "queries", multiple=True, help="Search query (repeatable)")
@click.option("--per-query", type=int, help="Videos requested per query")
@click.option("--limit", type=int, default=100, help="Maximum number of posts")
def youtube(queries: tuple[str, ...], per_query: int | None, limit: int) -> None:
    """Search YouTube for subway surfing videos and classify them."""
    try:
        config = get_config()
        analyzer = ContentAnalyzer()
        with YouTubeClient() as client:
            posts = collect_subway_surfing_posts(
                client,
                analyzer,
                queries=list(queries) or None,
                per_query=per_query or config.youtube.max_results_per_query,
                limit=limit,
            )
        _echo_json([p.to_dict() for p in posts])

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
def health() -> None:
    """Check configuration, station data and the dashboard API."""
    config = get_config()

    station_list = StationDirectory.from_config().get_stations()
    click.echo(f"Stations: {len(station_list)} available")
    click.echo(f"Proximity radius: {config.risk.proximity_radius_km} km")
    click.echo(f"OpenAI: {'configured' if config.openai.api_key else 'not configured'}")
    click.echo(f"YouTube: {'configured' if config.youtube.api_key else 'not configured'}")

    try:
        with ApiClient() as api:
            data = api.health_check()
            click.echo(f"API: ok ({len(data.get('riskLocations', []))} risk locations)")
    except Exception as e:
        click.echo(f"API: unavailable ({e})")
        sys.exit(1)


if __name__ == "__main__":
    cli()
