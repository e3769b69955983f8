"""Shared geospatial utility functions."""

import math

import numpy as np

EARTH_RADIUS_KM = 6371.0


class InvalidCoordinatesError(ValueError):
    """Raised when a latitude or longitude is not a finite number."""


def validate_coordinates(lat: float, lon: float) -> None:
    """Reject non-finite coordinates.

    Args:
        lat: Latitude in degrees.
        lon: Longitude in degrees.

    Raises:
        InvalidCoordinatesError: If either value is NaN or infinite.
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidCoordinatesError(f"Non-finite coordinates: ({lat}, {lon})")


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two WGS84 points.

    Args:
        lat1: Latitude of the first point in degrees.
        lon1: Longitude of the first point in degrees.
        lat2: Latitude of the second point in degrees.
        lon2: Longitude of the second point in degrees.

    Returns:
        Distance in kilometres on a sphere of radius 6371 km.
    """
    validate_coordinates(lat2, lon2)
    # Same arithmetic as the vectorized form so radius filters agree exactly
    return float(haversine_km_many(lat1, lon1, np.array([lat2]), np.array([lon2]))[0])


def haversine_km_many(
    lat: float,
    lon: float,
    lats: np.ndarray,
    lons: np.ndarray,
) -> np.ndarray:
    """Distances from one point to many points.

    Args:
        lat: Latitude of the origin in degrees.
        lon: Longitude of the origin in degrees.
        lats: Array of target latitudes in degrees.
        lons: Array of target longitudes in degrees.

    Returns:
        Array of distances in kilometres, same shape as ``lats``.
    """
    validate_coordinates(lat, lon)
    lats = np.asarray(lats, dtype=float)
    lons = np.asarray(lons, dtype=float)
    if not (np.isfinite(lats).all() and np.isfinite(lons).all()):
        raise InvalidCoordinatesError("Non-finite coordinates in target points")

    phi1 = np.radians(lat)
    phi2 = np.radians(lats)
    d_phi = np.radians(lats - lat)
    d_lambda = np.radians(lons - lon)

    a = np.sin(d_phi / 2) ** 2 + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    a = np.minimum(1.0, a)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_KM * c
