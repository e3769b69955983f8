"""Station risk classification heuristic."""

import copy
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Any

import numpy as np
import structlog
import yaml

from surfwatch.config import get_config
from surfwatch.risk.proximity import DEFAULT_RADIUS_KM, RiskEvent, count_nearby_events
from surfwatch.transit.stations import Station

logger = structlog.get_logger()


class RiskTier(IntEnum):
    """Ordered station risk tiers."""

    LOW = 0
    MEDIUM = 1
    HIGH = 2
    CRITICAL = 3

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "RiskTier":
        """Parse a tier from its lower- or upper-case name."""
        try:
            return cls[label.upper()]
        except KeyError:
            raise ValueError(f"Unknown risk tier: {label!r}") from None


@dataclass
class StationRiskAssessment:
    """Derived risk assessment for one station."""

    station_id: str
    station_name: str
    risk_tier: RiskTier
    incident_count: int
    risk_score: float
    nearby_event_count: int = 0
    reason_codes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the station risk payload shape."""
        return {
            "id": self.station_id,
            "name": self.station_name,
            "risk": self.risk_tier.label,
            "incidents": self.incident_count,
            "riskScore": round(self.risk_score, 2),
            "nearbyEvents": self.nearby_event_count,
            "reasonCodes": list(self.reason_codes),
        }


# Default scoring configuration
DEFAULT_SCORING = {
    "hotspots": {
        # Major interchanges with a history of subway surfing reports
        "high": {
            "names": [
                "Times Sq", "Union Sq", "Atlantic Av", "Herald Sq", "Penn Station",
                "Grand Central", "Fulton St", "Canal St", "Jamaica Center",
            ],
            "upgrade_probability": 0.7,  # high -> critical
        },
        "medium": {
            "names": [
                "Columbus Circle", "Brooklyn Bridge", "Yankee Stadium",
                "Coney Island", "Fordham", "Flushing",
            ],
            "upgrade_probability": 0.5,  # medium -> high
        },
    },
    "proximity": {
        # Checked in order; first threshold the count exceeds wins
        "thresholds": [
            {"above": 3, "tier": "critical", "reason_code": "PROXIMITY_GT_3"},
            {"above": 1, "tier": "high", "reason_code": "PROXIMITY_GT_1"},
            {"above": 0, "tier": "medium", "reason_code": "PROXIMITY_GT_0"},
        ],
    },
    "borough_uplift": {
        "borough": "Manhattan",
        "probability": 0.3,
        "tier": "medium",
    },
    # Inclusive incident ranges, half-open score ranges
    "bands": {
        "low": {"incidents": [1, 3], "score": [0.0, 3.0]},
        "medium": {"incidents": [2, 4], "score": [3.0, 5.0]},
        "high": {"incidents": [3, 8], "score": [5.0, 8.0]},
        "critical": {"incidents": [5, 14], "score": [7.0, 10.0]},
    },
}


class StationRiskScorer:
    """Risk classification engine with configurable hotspots and bands."""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        config_path: Path | None = None,
        rng: np.random.Generator | None = None,
        seed: int | None = None,
    ):
        """Initialize the scorer.

        Args:
            config: Scoring configuration overrides.
            config_path: Path to a YAML file with scoring overrides.
            rng: Random generator for the probabilistic tier upgrades and
                band draws.
            seed: Seed used to build a generator when ``rng`` is not given.
        """
        self.config = copy.deepcopy(DEFAULT_SCORING)

        if config_path and config_path.exists():
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f)
                if yaml_config:
                    self._merge_config(yaml_config)

        if config:
            self._merge_config(config)

        self._validate_bands()
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    @classmethod
    def from_config(cls, seed: int | None = None) -> "StationRiskScorer":
        """Build a scorer from the global configuration.

        Args:
            seed: Overrides the configured random seed.
        """
        risk = get_config().risk
        path = Path(risk.scoring_config_path) if risk.scoring_config_path else None
        return cls(config_path=path, seed=seed if seed is not None else risk.random_seed)

    def _merge_config(self, config: dict[str, Any]) -> None:
        """Merge configuration into current config."""
        if "hotspots" in config:
            for level, settings in config["hotspots"].items():
                if level in self.config["hotspots"]:
                    self.config["hotspots"][level].update(settings)
        if "proximity" in config:
            self.config["proximity"].update(config["proximity"])
        if "borough_uplift" in config:
            self.config["borough_uplift"].update(config["borough_uplift"])
        if "bands" in config:
            for tier, band in config["bands"].items():
                if tier in self.config["bands"]:
                    self.config["bands"][tier].update(band)

    def _validate_bands(self) -> None:
        """Require expected incident counts and scores to rise tier over tier."""
        previous: tuple[float, float] | None = None
        for tier in RiskTier:
            band = self.config["bands"][tier.label]
            inc_lo, inc_hi = band["incidents"]
            score_lo, score_hi = band["score"]
            if inc_lo < 0 or inc_hi < inc_lo or score_hi < score_lo:
                raise ValueError(f"Invalid band for tier {tier.label}: {band}")
            expected = ((inc_lo + inc_hi) / 2, (score_lo + score_hi) / 2)
            if previous is not None and (expected[0] <= previous[0] or expected[1] <= previous[1]):
                raise ValueError(f"Band expectations must increase with tier (at {tier.label})")
            previous = expected

    def hotspot_level(self, station_name: str) -> str | None:
        """Match a station name against the hotspot lists.

        Returns:
            ``"high"``, ``"medium"`` or None.
        """
        return self._match_hotspot(station_name, ("high", "medium"))

    def _match_hotspot(self, station_name: str, levels: tuple[str, ...]) -> str | None:
        for level in levels:
            names = self.config["hotspots"][level]["names"]
            if any(name in station_name for name in names):
                return level
        return None

    def is_known_hotspot(self, station_name: str) -> bool:
        """Whether the name matches a high-risk hotspot."""
        return self.hotspot_level(station_name) == "high"

    def assess_station(
        self,
        station: Station,
        nearby_event_count: int,
        is_known_hotspot: bool | None = None,
    ) -> StationRiskAssessment:
        """Assess one station.

        Args:
            station: Station being assessed.
            nearby_event_count: Risk events within the proximity radius.
            is_known_hotspot: Force the high-risk hotspot flag on or off.
                None derives it from the station name.

        Returns:
            StationRiskAssessment with tier, incident count and score.
        """
        count = max(0, int(nearby_event_count))
        reason_codes = []

        hotspot = self.hotspot_level(station.name)
        if is_known_hotspot is True:
            hotspot = "high"
        elif is_known_hotspot is False and hotspot == "high":
            hotspot = self._match_hotspot(station.name, ("medium",))

        floor = RiskTier.LOW
        if hotspot == "high":
            floor = self._maybe_upgrade(RiskTier.HIGH, self.config["hotspots"]["high"])
            reason_codes.append(f"HOTSPOT_HIGH_{floor.name}")
        elif hotspot == "medium":
            floor = self._maybe_upgrade(RiskTier.MEDIUM, self.config["hotspots"]["medium"])
            reason_codes.append(f"HOTSPOT_MEDIUM_{floor.name}")

        proximity_tier, proximity_code = self._proximity_tier(count)
        if proximity_code:
            reason_codes.append(proximity_code)

        tier = max(floor, proximity_tier)

        if hotspot is None and count == 0:
            uplift = self.config["borough_uplift"]
            if station.borough == uplift["borough"] and self.rng.random() < uplift["probability"]:
                tier = max(tier, RiskTier.from_label(uplift["tier"]))
                reason_codes.append(f"BOROUGH_{station.borough.upper()}")

        incidents, score = self._draw_band(tier)

        return StationRiskAssessment(
            station_id=station.id,
            station_name=station.name,
            risk_tier=tier,
            incident_count=max(incidents, count),
            risk_score=score,
            nearby_event_count=count,
            reason_codes=reason_codes,
        )

    def assess_stations(
        self,
        stations: list[Station],
        events: list[RiskEvent],
        radius_km: float = DEFAULT_RADIUS_KM,
    ) -> list[StationRiskAssessment]:
        """Assess every station against a set of risk events.

        Returns:
            Assessments ranked by tier, then incident count.
        """
        assessments = [
            self.assess_station(station, count_nearby_events(station, events, radius_km))
            for station in stations
        ]
        ranked = rank_assessments(assessments)

        logger.info(
            "Station risk assessment complete",
            num_stations=len(ranked),
            num_events=len(events),
            num_critical=sum(1 for a in ranked if a.risk_tier == RiskTier.CRITICAL),
        )

        return ranked

    def _maybe_upgrade(self, tier: RiskTier, settings: dict[str, Any]) -> RiskTier:
        if self.rng.random() < settings["upgrade_probability"]:
            return RiskTier(min(tier + 1, RiskTier.CRITICAL))
        return tier

    def _proximity_tier(self, count: int) -> tuple[RiskTier, str | None]:
        for threshold in self.config["proximity"]["thresholds"]:
            if count > threshold["above"]:
                return RiskTier.from_label(threshold["tier"]), threshold["reason_code"]
        return RiskTier.LOW, None

    def _draw_band(self, tier: RiskTier) -> tuple[int, float]:
        band = self.config["bands"][tier.label]
        inc_lo, inc_hi = band["incidents"]
        score_lo, score_hi = band["score"]
        incidents = int(self.rng.integers(inc_lo, inc_hi, endpoint=True))
        score = float(self.rng.uniform(score_lo, score_hi))
        return incidents, score


def rank_assessments(assessments: list[StationRiskAssessment]) -> list[StationRiskAssessment]:
    """Sort assessments critical first, then by incident count descending."""
    return sorted(assessments, key=lambda a: (-a.risk_tier, -a.incident_count))


# Convenience function with default scorer
def assess_station(
    station: Station,
    nearby_event_count: int,
    is_known_hotspot: bool | None = None,
) -> StationRiskAssessment:
    """Assess a station using the default scorer."""
    scorer = StationRiskScorer()
    return scorer.assess_station(station, nearby_event_count, is_known_hotspot)
