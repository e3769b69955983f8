"""Risk scoring and proximity analysis."""

from surfwatch.risk.proximity import RiskEvent, count_nearby_events, nearby_events
from surfwatch.risk.scoring import (
    RiskTier,
    StationRiskAssessment,
    StationRiskScorer,
    assess_station,
    rank_assessments,
)

__all__ = [
    "nearby_events",
    "count_nearby_events",
    "RiskEvent",
    "RiskTier",
    "StationRiskAssessment",
    "StationRiskScorer",
    "assess_station",
    "rank_assessments",
]
