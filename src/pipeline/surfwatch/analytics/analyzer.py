"""Language-model content analysis for subway surfing risk signals."""

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog
from openai import OpenAI, OpenAIError

from surfwatch.config import get_config

logger = structlog.get_logger()

CLASSIFICATIONS = ("intent", "location", "warning", "safe")


@dataclass
class RiskAnalysis:
    """Classification of a single post."""

    risk_score: float
    confidence: float
    classification: str
    reasoning: str
    keywords: list[str] = field(default_factory=list)

    @classmethod
    def failed(cls) -> "RiskAnalysis":
        return cls(
            risk_score=0.0,
            confidence=0.0,
            classification="safe",
            reasoning="Analysis failed",
            keywords=[],
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RiskAnalysis":
        classification = data.get("classification", "safe")
        if classification not in CLASSIFICATIONS:
            classification = "safe"
        return cls(
            risk_score=min(100.0, max(0.0, float(data.get("riskScore", 0)))),
            confidence=min(1.0, max(0.0, float(data.get("confidence", 0)))),
            classification=classification,
            reasoning=str(data.get("reasoning", "")),
            keywords=[str(k) for k in data.get("keywords", [])],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "riskScore": self.risk_score,
            "confidence": self.confidence,
            "classification": self.classification,
            "reasoning": self.reasoning,
            "keywords": list(self.keywords),
        }


@dataclass
class SentimentAnalysis:
    """Safety-oriented sentiment of a post."""

    sentiment: str
    score: float
    emotions: list[str] = field(default_factory=list)
    safety_relevance: float = 0.0

    @classmethod
    def neutral(cls) -> "SentimentAnalysis":
        return cls(sentiment="neutral", score=0.0, emotions=[], safety_relevance=0.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sentiment": self.sentiment,
            "score": self.score,
            "emotions": list(self.emotions),
            "safetyRelevance": self.safety_relevance,
        }


@dataclass
class PredictiveInsight:
    """A forward-looking insight for the dashboard."""

    id: str
    type: str  # trend_prediction | risk_hotspot | behavior_pattern | safety_opportunity
    title: str
    description: str
    confidence: float
    timeframe: str
    actionable: bool
    priority: str  # low | medium | high | critical

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PredictiveInsight":
        return cls(
            id=str(data.get("id", "")),
            type=data.get("type", "trend_prediction"),
            title=data.get("title", ""),
            description=data.get("description", ""),
            confidence=float(data.get("confidence", 0)),
            timeframe=data.get("timeframe", ""),
            actionable=bool(data.get("actionable", False)),
            priority=data.get("priority", "low"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "confidence": self.confidence,
            "timeframe": self.timeframe,
            "actionable": self.actionable,
            "priority": self.priority,
        }


# (content, platform) -> RiskAnalysis
Classifier = Callable[[str, str], RiskAnalysis]


CONTENT_PROMPT = """\
Analyze this social media content for subway surfing risk indicators:
Content: "{content}"
Platform: {platform}

Evaluate for:
1. Intent to engage in subway surfing
2. Location planning or coordination
3. Warning signs or dangerous behavior
4. Safety messaging or prevention content

Respond in JSON:
{{"riskScore": number (0-100), "confidence": number (0-1),
 "classification": "intent|location|warning|safe",
 "reasoning": "explanation", "keywords": ["..."]}}
"""

SENTIMENT_PROMPT = """\
Analyze the sentiment and emotional content of this text:
"{content}"

Focus on safety-related sentiment that might relate to subway surfing attitudes.

Respond in JSON:
{{"sentiment": "positive|negative|neutral", "score": number (-1 to 1),
 "emotions": ["..."], "safetyRelevance": number (0-1)}}
"""

INSIGHTS_PROMPT = """\
Based on this subway surfing monitoring data, generate 3-5 predictive insights
about emerging risk patterns, potential hotspot locations, behavioral trends and
safety intervention opportunities.

Trend Data: {trends}
Risk Feed: {feed}

Respond in JSON:
{{"insights": [{{"id": "...", "type": "trend_prediction|risk_hotspot|behavior_pattern|safety_opportunity",
 "title": "...", "description": "...", "confidence": number (0-1), "timeframe": "...",
 "actionable": boolean, "priority": "low|medium|high|critical"}}]}}
"""

PREDICTIONS_PROMPT = """\
Based on current subway surfing monitoring data, predict potential risk events
in the next 24-48 hours, considering activity levels, platform engagement,
historical precedents and environmental factors.

{data}

Respond in JSON:
{{"predictions": [{{"event": "...", "probability": number (0-1), "timeframe": "...",
 "location": "...", "preventionActions": ["..."]}}]}}
"""

PATTERNS_PROMPT = """\
Analyze this historical subway surfing data for time-based patterns, location
clustering, platform-specific behaviors and seasonal variations:

{data}

Respond in JSON:
{{"patterns": [{{"type": "temporal|spatial|behavioral|seasonal", "description": "...",
 "strength": number (0-1), "implications": "..."}}]}}
"""


class ContentAnalyzer:
    """Classifies monitoring content through a chat-completions model.

    Every method returns a fixed fallback when the model call or the JSON
    parsing fails, so callers never see provider errors.
    """

    def __init__(self, client: Any = None, model: str | None = None):
        """Initialize the analyzer.

        Args:
            client: OpenAI client (or compatible object). Created from the
                configured API key when omitted.
            model: Chat model name.
        """
        config = get_config()
        self.model = model or config.openai.model
        self._client = client
        self._api_key = config.openai.api_key

    @property
    def client(self) -> Any:
        """Get or create the OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise ValueError("OPENAI_API_KEY is required for content analysis")
            self._client = OpenAI(api_key=self._api_key)
        return self._client

    def __call__(self, content: str, platform: str) -> RiskAnalysis:
        return self.analyze_content(content, platform)

    def _complete_json(self, prompt: str, temperature: float) -> dict[str, Any]:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
            temperature=temperature,
        )
        text = response.choices[0].message.content or "{}"
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Model response is not a JSON object")
        return data

    def analyze_content(self, content: str, platform: str) -> RiskAnalysis:
        """Classify a post for subway surfing risk.

        Args:
            content: Post text.
            platform: Source platform name.

        Returns:
            RiskAnalysis, or the failed-analysis default.
        """
        try:
            data = self._complete_json(CONTENT_PROMPT.format(content=content, platform=platform), 0.1)
            return RiskAnalysis.from_dict(data)
        except (OpenAIError, ValueError, TypeError) as e:
            logger.warning("Content analysis failed", platform=platform, error=str(e))
            return RiskAnalysis.failed()

    def analyze_sentiment(self, content: str) -> SentimentAnalysis:
        """Score the safety-related sentiment of a post."""
        try:
            data = self._complete_json(SENTIMENT_PROMPT.format(content=content), 0.1)
            return SentimentAnalysis(
                sentiment=data.get("sentiment", "neutral"),
                score=float(data.get("score", 0)),
                emotions=[str(e) for e in data.get("emotions", [])],
                safety_relevance=float(data.get("safetyRelevance", 0)),
            )
        except (OpenAIError, ValueError, TypeError) as e:
            logger.warning("Sentiment analysis failed", error=str(e))
            return SentimentAnalysis.neutral()

    def generate_predictive_insights(
        self,
        trend_data: list[dict[str, Any]],
        feed_items: list[dict[str, Any]],
    ) -> list[PredictiveInsight]:
        """Generate dashboard insights from recent trends and feed items.

        Only the five most recent rows of each input are sent to the model.
        """
        prompt = INSIGHTS_PROMPT.format(
            trends=json.dumps(trend_data[:5], default=str),
            feed=json.dumps(feed_items[:5], default=str),
        )
        try:
            data = self._complete_json(prompt, 0.3)
            return [PredictiveInsight.from_dict(i) for i in data.get("insights", [])]
        except (OpenAIError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Insight generation failed", error=str(e))
            return []

    def predict_risk_events(self, current_data: dict[str, Any]) -> list[dict[str, Any]]:
        """Predict risk events for the next 24-48 hours."""
        try:
            data = self._complete_json(PREDICTIONS_PROMPT.format(data=json.dumps(current_data, default=str)), 0.2)
            predictions = data.get("predictions", [])
            return predictions if isinstance(predictions, list) else []
        except (OpenAIError, ValueError, TypeError) as e:
            logger.warning("Risk prediction failed", error=str(e))
            return []

    def detect_patterns(self, historical_data: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Detect temporal, spatial, behavioral and seasonal patterns."""
        try:
            data = self._complete_json(PATTERNS_PROMPT.format(data=json.dumps(historical_data, default=str)), 0.2)
            patterns = data.get("patterns", [])
            return patterns if isinstance(patterns, list) else []
        except (OpenAIError, ValueError, TypeError) as e:
            logger.warning("Pattern detection failed", error=str(e))
            return []
