"""Language-model content analytics."""

from surfwatch.analytics.analyzer import (
    Classifier,
    ContentAnalyzer,
    PredictiveInsight,
    RiskAnalysis,
    SentimentAnalysis,
)

__all__ = [
    "Classifier",
    "ContentAnalyzer",
    "RiskAnalysis",
    "SentimentAnalysis",
    "PredictiveInsight",
]
