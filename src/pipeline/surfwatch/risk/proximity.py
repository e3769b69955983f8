"""Station proximity analysis for risk events."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import numpy as np
import structlog

from surfwatch.db.records import parse_timestamp
from surfwatch.geo_utils import haversine_km_many
from surfwatch.transit.stations import Station

logger = structlog.get_logger()

DEFAULT_RADIUS_KM = 2.0


@dataclass(frozen=True)
class RiskEvent:
    """A geo-tagged risk signal (a "risk location" on the dashboard)."""

    id: str
    latitude: float
    longitude: float
    risk_level: str
    name: str = ""
    description: str | None = None
    timestamp: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RiskEvent":
        """Create a RiskEvent from a seed or API record."""
        return cls(
            id=str(data.get("id", "")),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            risk_level=data.get("riskLevel", data.get("risk_level", "low")),
            name=data.get("name", ""),
            description=data.get("description"),
            timestamp=parse_timestamp(data.get("timestamp")),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "riskLevel": self.risk_level,
            "description": self.description,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
        }


def event_distances_km(station: Station, events: list[RiskEvent]) -> np.ndarray:
    """Distances in km from a station to each event, in event order."""
    if not events:
        return np.empty(0)
    lats = np.array([e.latitude for e in events], dtype=float)
    lons = np.array([e.longitude for e in events], dtype=float)
    return haversine_km_many(station.latitude, station.longitude, lats, lons)


def nearby_events(
    station: Station,
    events: list[RiskEvent],
    radius_km: float = DEFAULT_RADIUS_KM,
) -> list[RiskEvent]:
    """Find risk events strictly within a radius of a station.

    Args:
        station: Station to search around.
        events: Candidate risk events.
        radius_km: Search radius in kilometres. Events exactly on the
            radius are excluded.

    Returns:
        Matching events sorted by distance, nearest first.
    """
    if not events:
        return []

    distances = event_distances_km(station, events)
    inside = np.flatnonzero(distances < radius_km)
    order = inside[np.argsort(distances[inside], kind="stable")]

    logger.debug(
        "Proximity search complete",
        station_id=station.id,
        num_nearby=len(order),
        radius_km=radius_km,
    )

    return [events[i] for i in order]


def count_nearby_events(
    station: Station,
    events: list[RiskEvent],
    radius_km: float = DEFAULT_RADIUS_KM,
) -> int:
    """Number of risk events strictly within a radius of a station."""
    if not events:
        return 0
    return int(np.count_nonzero(event_distances_km(station, events) < radius_km))


def batch_proximity_analysis(
    stations: list[Station],
    events: list[RiskEvent],
    radius_km: float = DEFAULT_RADIUS_KM,
) -> dict[str, list[RiskEvent]]:
    """Run proximity analysis for many stations.

    Returns:
        Dictionary mapping station ID to its nearby events. Stations with no
        nearby events are omitted.
    """
    results = {}

    for station in stations:
        nearby = nearby_events(station, events, radius_km)
        if nearby:
            results[station.id] = nearby

    return results
