"""Subway station directory with a static catalog and an optional live source."""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any

import httpx
import structlog
import yaml

from surfwatch.config import get_config

logger = structlog.get_logger()

CATALOG_RESOURCE = "stations.yaml"


@dataclass(frozen=True)
class Station:
    """A subway station."""

    id: str
    name: str
    latitude: float
    longitude: float
    borough: str
    lines: tuple[str, ...] = ()
    complex: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Station":
        """Create a Station from a catalog or API record."""
        lat = data.get("latitude", data.get("lat"))
        lon = data.get("longitude", data.get("lon"))
        if lat is None or lon is None:
            raise ValueError(f"Station {data.get('id')} has no coordinates")

        return cls(
            id=str(data["id"]),
            name=data["name"],
            latitude=float(lat),
            longitude=float(lon),
            borough=data.get("borough", "Unknown"),
            lines=tuple(str(line) for line in data.get("lines", [])),
            complex=data.get("complex"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "borough": self.borough,
            "lines": list(self.lines),
        }
        if self.complex is not None:
            data["complex"] = self.complex
        return data


def _read_catalog(path: Path | None = None) -> dict[str, Any]:
    if path is not None:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    text = resources.files("surfwatch.transit").joinpath(CATALOG_RESOURCE).read_text()
    return yaml.safe_load(text) or {}


def load_station_catalog(path: Path | None = None) -> list[Station]:
    """Load the static station list.

    Args:
        path: Optional YAML file. Defaults to the bundled NYC catalog.

    Returns:
        Stations in catalog order.
    """
    data = _read_catalog(path)
    return [Station.from_dict(s) for s in data.get("stations", [])]


def load_hub_stations(path: Path | None = None) -> list[Station]:
    """Load the major interchange stations used by the map overlay."""
    data = _read_catalog(path)
    return [Station.from_dict(s) for s in data.get("hubs", [])]


@dataclass
class StationCache:
    """A station list together with when it was cached and for how long."""

    stations: list[Station]
    created_at: float
    ttl_seconds: float
    source: str = "static"

    def is_expired(self, now: float) -> bool:
        return now - self.created_at >= self.ttl_seconds


@dataclass
class StationDirectory:
    """Resolves the station list, caching it for a fixed TTL.

    When ``stations_url`` is set the directory fetches a JSON list of station
    records from it. Failures fall back to the static catalog without caching
    the fallback, so the live source is tried again on the next call.
    """

    stations_url: str | None = None
    ttl_seconds: float = 24 * 60 * 60
    timeout: float = 10.0
    catalog_path: Path | None = None
    clock: Callable[[], float] = time.monotonic
    transport: httpx.BaseTransport | None = None
    _cache: StationCache | None = field(default=None, init=False, repr=False)

    @classmethod
    def from_config(cls) -> "StationDirectory":
        """Build a directory from the global configuration."""
        config = get_config()
        return cls(
            stations_url=config.transit.stations_url,
            ttl_seconds=config.transit.cache_ttl_seconds,
            timeout=config.transit.timeout,
        )

    @property
    def cache(self) -> StationCache | None:
        return self._cache

    def invalidate(self) -> None:
        """Drop the cached station list."""
        self._cache = None

    def get_stations(self) -> list[Station]:
        """Get the current station list.

        Returns:
            Cached stations while fresh, otherwise freshly resolved stations.
        """
        now = self.clock()
        if self._cache is not None and not self._cache.is_expired(now):
            return list(self._cache.stations)

        if not self.stations_url:
            stations = load_station_catalog(self.catalog_path)
            self._cache = StationCache(stations, now, self.ttl_seconds, source="static")
            return list(stations)

        try:
            stations = self._fetch_live()
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning(
                "Live station source unavailable, using static catalog",
                url=self.stations_url,
                error=str(e),
            )
            return load_station_catalog(self.catalog_path)

        if not stations:
            logger.warning("Live station source returned no stations", url=self.stations_url)
            return load_station_catalog(self.catalog_path)

        self._cache = StationCache(stations, now, self.ttl_seconds, source="live")
        logger.info("Cached live station list", num_stations=len(stations))
        return list(stations)

    def get_hub_stations(self) -> list[Station]:
        """Get the hub stations shown on the map overlay."""
        return load_hub_stations(self.catalog_path)

    def _fetch_live(self) -> list[Station]:
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.get(self.stations_url)
            response.raise_for_status()
            payload = response.json()

        records = payload.get("stations", []) if isinstance(payload, dict) else payload
        return [Station.from_dict(record) for record in records]
