"""Tests for great-circle distance helpers."""

import math

import numpy as np
import pytest

from surfwatch.geo_utils import (
    EARTH_RADIUS_KM,
    InvalidCoordinatesError,
    haversine_km,
    haversine_km_many,
)

TIMES_SQ = (40.7557, -73.9868)
UNION_SQ = (40.7359, -73.9911)
CONEY_ISLAND = (40.5755, -73.9707)


class TestHaversine:
    """Tests for haversine_km."""

    @pytest.mark.parametrize(
        "point",
        [TIMES_SQ, (0.0, 0.0), (-33.8688, 151.2093), (89.9, 179.9)],
        ids=["times_sq", "origin", "sydney", "near_pole"],
    )
    def test_identical_points_are_zero(self, point):
        assert haversine_km(*point, *point) == 0.0

    @pytest.mark.parametrize(
        "a, b",
        [
            (TIMES_SQ, UNION_SQ),
            (TIMES_SQ, CONEY_ISLAND),
            ((51.5074, -0.1278), (48.8566, 2.3522)),
            ((10.0, 179.5), (10.0, -179.5)),
        ],
        ids=["midtown", "coney_island", "london_paris", "antimeridian"],
    )
    def test_symmetric(self, a, b):
        assert haversine_km(*a, *b) == pytest.approx(haversine_km(*b, *a), abs=1e-9)

    def test_known_distance_london_paris(self):
        # Roughly 343.5 km on a 6371 km sphere
        assert haversine_km(51.5074, -0.1278, 48.8566, 2.3522) == pytest.approx(343.5, abs=1.0)

    def test_one_degree_of_latitude(self):
        expected = EARTH_RADIUS_KM * math.pi / 180
        assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(expected, rel=1e-9)

    def test_antipodal_points_are_half_circumference(self):
        assert haversine_km(0.0, 0.0, 0.0, 180.0) == pytest.approx(math.pi * EARTH_RADIUS_KM, rel=1e-9)

    def test_point_between_on_meridian(self):
        a, b, c = (40.0, -74.0), (40.5, -74.0), (41.0, -74.0)
        ac = haversine_km(*a, *c)
        assert ac >= haversine_km(*a, *b)
        assert ac >= haversine_km(*b, *c)
        assert ac == pytest.approx(haversine_km(*a, *b) + haversine_km(*b, *c), rel=1e-9)

    def test_distance_grows_with_separation(self):
        distances = [haversine_km(40.0, -74.0, 40.0 + d, -74.0) for d in (0.1, 0.5, 1.0, 5.0)]
        assert distances == sorted(distances)

    @pytest.mark.parametrize(
        "coords",
        [
            (math.nan, 0.0, 0.0, 0.0),
            (0.0, math.inf, 0.0, 0.0),
            (0.0, 0.0, -math.inf, 0.0),
            (0.0, 0.0, 0.0, math.nan),
        ],
        ids=["nan_lat1", "inf_lon1", "neg_inf_lat2", "nan_lon2"],
    )
    def test_rejects_non_finite(self, coords):
        with pytest.raises(InvalidCoordinatesError):
            haversine_km(*coords)

    def test_invalid_coordinates_is_value_error(self):
        with pytest.raises(ValueError):
            haversine_km(math.nan, 0.0, 0.0, 0.0)


class TestHaversineMany:
    """Tests for the vectorized variant."""

    def test_matches_scalar(self):
        lats = np.array([UNION_SQ[0], CONEY_ISLAND[0], TIMES_SQ[0]])
        lons = np.array([UNION_SQ[1], CONEY_ISLAND[1], TIMES_SQ[1]])

        result = haversine_km_many(*TIMES_SQ, lats, lons)

        expected = [haversine_km(*TIMES_SQ, la, lo) for la, lo in zip(lats, lons)]
        assert result.tolist() == expected
        assert result[2] == 0.0

    def test_empty_arrays(self):
        result = haversine_km_many(*TIMES_SQ, np.array([]), np.array([]))
        assert result.shape == (0,)

    def test_rejects_non_finite_targets(self):
        with pytest.raises(InvalidCoordinatesError):
            haversine_km_many(*TIMES_SQ, np.array([40.0, np.nan]), np.array([-74.0, -74.0]))
