"""HTTP client for the SurfWatch dashboard API."""

from typing import Any

import httpx
import structlog

from surfwatch.config import get_config
from surfwatch.db.records import Alert, RiskFeedItem
from surfwatch.risk.proximity import RiskEvent

logger = structlog.get_logger()


class ApiClient:
    """Client for reading monitoring data from the dashboard backend."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the API client.

        Args:
            base_url: API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (used by tests).
        """
        config = get_config()
        self.base_url = (base_url or config.api.base_url).rstrip("/")
        self.timeout = timeout or config.api.timeout
        self.api_key = config.api.api_key
        self.transport = transport

        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {}
            if self.api_key:
                headers["X-Api-Key"] = self.api_key
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self.transport,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _get(self, path: str) -> Any:
        response = self.client.get(path)
        response.raise_for_status()
        return response.json()

    def health_check(self) -> dict[str, Any]:
        """Check that the dashboard backend answers.

        Returns:
            The dashboard payload.

        Raises:
            httpx.HTTPError: If the backend is unreachable or returns an error.
        """
        return self._get("/api/dashboard")

    # Dashboard

    def get_dashboard(self) -> dict[str, Any]:
        """Get the combined dashboard payload.

        Returns:
            Dictionary with trendData, alerts, platformMetrics,
            riskFeedItems, platformInsights and riskLocations.
        """
        return self._get("/api/dashboard")

    def get_trend_data(self, limit: int = 10) -> list[dict[str, Any]]:
        """Get daily trend counts."""
        return self._get("/api/dashboard/trends")[:limit]

    def get_active_alerts(self) -> list[Alert]:
        """Get active alerts."""
        return [Alert.from_dict(a) for a in self._get("/api/dashboard/alerts")]

    def get_platform_metrics(self) -> list[dict[str, Any]]:
        """Get per-platform harm and safety percentages."""
        return self._get("/api/dashboard/platforms")

    def get_recent_feed_items(self, limit: int = 20) -> list[RiskFeedItem]:
        """Get the most recent risk feed items."""
        items = self._get("/api/dashboard/risk-feed")[:limit]
        return [RiskFeedItem.from_dict(i) for i in items]

    def get_platform_insights(self, limit: int = 10) -> list[dict[str, Any]]:
        """Get short per-platform insight notes."""
        return self._get("/api/dashboard/insights")[:limit]

    # Risk locations

    def get_risk_events(self) -> list[RiskEvent]:
        """Get geo-tagged risk locations.

        Records without usable coordinates are skipped.
        """
        events = []
        for record in self._get("/api/dashboard/risk-locations"):
            try:
                events.append(RiskEvent.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed risk location", record_id=record.get("id"), error=str(e))
        return events

    # Analytics

    def analyze_content(self, content: str, platform: str) -> dict[str, Any]:
        """Ask the backend to classify a piece of content.

        Args:
            content: Post text.
            platform: Source platform name.

        Returns:
            Risk analysis dictionary.
        """
        response = self.client.post(
            "/api/analytics/analyze-content",
            json={"content": content, "platform": platform},
        )
        response.raise_for_status()
        return response.json()
