"""Subway station reference data."""

from surfwatch.transit.stations import (
    Station,
    StationCache,
    StationDirectory,
    load_hub_stations,
    load_station_catalog,
)

__all__ = [
    "Station",
    "StationCache",
    "StationDirectory",
    "load_station_catalog",
    "load_hub_stations",
]
