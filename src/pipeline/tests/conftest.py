"""Shared test fixtures for surfwatch pipeline tests."""

from datetime import datetime, timezone

import pytest

import surfwatch.config as config_module
from surfwatch.risk.proximity import RiskEvent
from surfwatch.risk.scoring import StationRiskScorer
from surfwatch.transit.stations import Station

CONFIG_ENV_VARS = [
    "PROXIMITY_RADIUS_KM",
    "RISK_RANDOM_SEED",
    "RISK_SCORING_CONFIG",
    "MTA_STATIONS_URL",
    "STATIONS_CACHE_TTL_SECONDS",
    "SURFWATCH_API_URL",
    "SURFWATCH_API_KEY",
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "YOUTUBE_API_KEY",
    "YOUTUBE_LOOKBACK_DAYS",
]


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    """Start every test from default configuration with no API keys."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config_module._config = config_module.Config()
    yield config_module._config
    config_module._config = None


@pytest.fixture
def fixed_now():
    return datetime(2024, 7, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def times_sq():
    """A high-risk hotspot interchange."""
    return Station(
        id="116",
        name="Times Sq-42 St",
        latitude=40.755477,
        longitude=-73.986754,
        borough="Manhattan",
        lines=("1", "2", "3", "7", "N", "Q", "R", "W", "S"),
    )


@pytest.fixture
def quiet_bronx_station():
    """A station with no hotspot name outside Manhattan."""
    return Station(
        id="512",
        name="Woodlawn",
        latitude=40.886037,
        longitude=-73.878751,
        borough="Bronx",
        lines=("4",),
    )


@pytest.fixture
def sample_events(fixed_now):
    """Risk events around lower Manhattan and Brooklyn."""
    return [
        RiskEvent(
            id="1",
            name="Union Square (4/5/6/N/Q/R/W/L)",
            latitude=40.7359,
            longitude=-73.9911,
            risk_level="high",
            description="Increased surveillance needed at major transit hub",
            timestamp=datetime(2024, 7, 1, 9, 0, 0, tzinfo=timezone.utc),
        ),
        RiskEvent(
            id="2",
            name="Bedford Ave (L)",
            latitude=40.7167,
            longitude=-73.9568,
            risk_level="critical",
            timestamp=datetime(2024, 7, 1, 11, 30, 0, tzinfo=timezone.utc),
        ),
        RiskEvent(
            id="3",
            name="Coney Island (D/F/N/Q)",
            latitude=40.5755,
            longitude=-73.9707,
            risk_level="medium",
            timestamp=datetime(2024, 6, 29, 12, 0, 0, tzinfo=timezone.utc),
        ),
    ]


@pytest.fixture
def seeded_scorer():
    """Scorer with a fixed seed so band draws are repeatable."""
    return StationRiskScorer(seed=1234)
