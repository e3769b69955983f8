"""JSON payloads served to the monitoring dashboard."""

from datetime import datetime, timezone
from typing import Any, Protocol

import structlog

from surfwatch.db.records import Alert, RiskFeedItem
from surfwatch.risk.proximity import DEFAULT_RADIUS_KM, RiskEvent, nearby_events
from surfwatch.risk.scoring import StationRiskScorer
from surfwatch.transit.stations import Station

logger = structlog.get_logger()

MAP_SOURCE = "NYC_MTA_STATIONS"


class MonitoringStore(Protocol):
    """Anything that serves the dashboard collections (seed data or the API)."""

    def get_risk_events(self) -> list[RiskEvent]: ...
    def get_active_alerts(self) -> list[Alert]: ...
    def get_recent_feed_items(self, limit: int = 20) -> list[RiskFeedItem]: ...
    def get_trend_data(self, limit: int = 10) -> list[dict[str, Any]]: ...
    def get_platform_metrics(self) -> list[dict[str, Any]]: ...
    def get_platform_insights(self, limit: int = 10) -> list[dict[str, Any]]: ...


def _utc(ts: datetime) -> datetime:
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def time_ago(then: datetime, now: datetime | None = None) -> str:
    """Human-readable age, e.g. ``"2 days ago"`` or ``"Less than 1 hour ago"``."""
    now = _utc(now or datetime.now(timezone.utc))
    hours = int((now - _utc(then)).total_seconds() // 3600)
    days = hours // 24

    if days > 0:
        return f"{days} day{'s' if days > 1 else ''} ago"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    return "Less than 1 hour ago"


def related_alert_count(station: Station, alerts: list[Alert]) -> int:
    """Alerts that mention the station by name or its borough in the title."""
    name = station.name.lower()
    borough = station.borough.lower()
    return sum(
        1
        for alert in alerts
        if name in (alert.description or "").lower() or borough in (alert.title or "").lower()
    )


def build_station_risk_feed(
    stations: list[Station],
    events: list[RiskEvent],
    scorer: StationRiskScorer,
    radius_km: float = DEFAULT_RADIUS_KM,
    source: str = "static",
    now: datetime | None = None,
) -> dict[str, Any]:
    """Ranked risk assessments for every station.

    Args:
        stations: Stations to assess. An empty list yields an empty feed.
        events: Geo-tagged risk events.
        scorer: Risk classification engine.
        radius_km: Proximity radius.
        source: Where the station list came from.
        now: Generation time. Defaults to the current UTC time.

    Returns:
        Payload with ``stations``, ``generatedAt``, ``source`` and
        ``totalStations``.
    """
    assessments = scorer.assess_stations(stations, events, radius_km)
    now = now or datetime.now(timezone.utc)

    return {
        "stations": [a.to_dict() for a in assessments],
        "generatedAt": now.isoformat(),
        "source": source,
        "totalStations": len(assessments),
    }


def build_map_data(
    hubs: list[Station],
    events: list[RiskEvent],
    alerts: list[Alert],
    scorer: StationRiskScorer,
    radius_km: float = DEFAULT_RADIUS_KM,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Overlay risk events and alerts on the hub stations for the map view."""
    now = now or datetime.now(timezone.utc)
    stations = []

    for hub in hubs:
        nearby = nearby_events(hub, events, radius_km)
        assessment = scorer.assess_station(hub, len(nearby))

        timestamps = [e.timestamp for e in nearby if e.timestamp is not None]
        if not nearby:
            last_incident = "No recent incidents"
        elif timestamps:
            last_incident = time_ago(max(timestamps, key=_utc), now)
        else:
            last_incident = "Unknown"

        stations.append({
            **hub.to_dict(),
            "riskLevel": assessment.risk_tier.label,
            "incidentCount": assessment.incident_count,
            "riskScore": round(assessment.risk_score, 2),
            "lastIncident": last_incident,
            "riskEvents": [e.to_dict() for e in nearby],
            "relatedAlerts": related_alert_count(hub, alerts),
        })

    logger.info("Built map overlay", num_hubs=len(stations), num_events=len(events))

    return {
        "stations": stations,
        "lastUpdated": now.isoformat(),
        "source": MAP_SOURCE,
        "totalStations": len(stations),
    }


def build_dashboard_snapshot(store: MonitoringStore) -> dict[str, Any]:
    """Collect every dashboard panel from a store in one payload."""
    return {
        "trendData": store.get_trend_data(),
        "alerts": [a.to_dict() for a in store.get_active_alerts()],
        "platformMetrics": store.get_platform_metrics(),
        "riskFeedItems": [i.to_dict() for i in store.get_recent_feed_items()],
        "platformInsights": store.get_platform_insights(),
        "riskLocations": [e.to_dict() for e in store.get_risk_events()],
    }
