"""Bundled sample monitoring data."""

from datetime import datetime, timedelta, timezone
from importlib import resources
from pathlib import Path
from typing import Any

import structlog
import yaml

from surfwatch.db.records import Alert, RiskFeedItem
from surfwatch.risk.proximity import RiskEvent

logger = structlog.get_logger()

SEED_RESOURCE = "seed.yaml"


class SeedStore:
    """Read-only store backed by a YAML seed file.

    Rows carrying ``age_hours`` get a timestamp that many hours before
    ``now``. Collections are returned newest first, like the dashboard API.
    """

    def __init__(self, path: Path | None = None, now: datetime | None = None):
        """Load the seed data.

        Args:
            path: YAML seed file. Defaults to the bundled sample data.
            now: Reference time for relative timestamps. Defaults to the
                current UTC time.
        """
        self.now = now or datetime.now(timezone.utc)

        if path is not None:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        else:
            text = resources.files("surfwatch.db").joinpath(SEED_RESOURCE).read_text()
            data = yaml.safe_load(text) or {}

        self._data = {key: [self._stamp(row) for row in rows or []] for key, rows in data.items()}

        logger.debug(
            "Loaded seed data",
            collections={key: len(rows) for key, rows in self._data.items()},
        )

    def _stamp(self, row: dict[str, Any]) -> dict[str, Any]:
        row = dict(row)
        if "age_hours" in row:
            row["timestamp"] = self.now - timedelta(hours=float(row.pop("age_hours")))
        return row

    def _newest_first(self, key: str) -> list[dict[str, Any]]:
        rows = self._data.get(key, [])
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        return sorted(rows, key=lambda r: r.get("timestamp") or oldest, reverse=True)

    def get_risk_events(self) -> list[RiskEvent]:
        """Get all geo-tagged risk locations."""
        return [RiskEvent.from_dict(row) for row in self._newest_first("risk_locations")]

    def get_active_alerts(self) -> list[Alert]:
        """Get alerts that are still active."""
        alerts = [Alert.from_dict(row) for row in self._newest_first("alerts")]
        return [a for a in alerts if a.is_active]

    def get_recent_feed_items(self, limit: int = 20) -> list[RiskFeedItem]:
        """Get the most recent risk feed items."""
        rows = self._newest_first("risk_feed_items")[:limit]
        return [RiskFeedItem.from_dict(row) for row in rows]

    def get_trend_data(self, limit: int = 10) -> list[dict[str, Any]]:
        """Get daily trend counts."""
        return [dict(row) for row in self._data.get("trend_data", [])[:limit]]

    def get_platform_metrics(self) -> list[dict[str, Any]]:
        """Get per-platform harm and safety percentages."""
        return [
            {
                "platform": row["platform"],
                "harmPercentage": float(row["harm_percentage"]),
                "safetyPercentage": float(row["safety_percentage"]),
            }
            for row in self._data.get("platform_metrics", [])
        ]

    def get_platform_insights(self, limit: int = 10) -> list[dict[str, Any]]:
        """Get short per-platform insight notes."""
        return [dict(row) for row in self._data.get("platform_insights", [])[:limit]]
