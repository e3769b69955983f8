"""Tests for the bundled seed data store."""

from datetime import timedelta

import pytest

from surfwatch.db.records import Alert, RiskFeedItem
from surfwatch.db.seed import SeedStore
from surfwatch.risk.proximity import RiskEvent


@pytest.fixture
def store(fixed_now):
    return SeedStore(now=fixed_now)


class TestSeedStore:
    """Tests for SeedStore collections."""

    def test_risk_events_newest_first(self, store, fixed_now):
        events = store.get_risk_events()

        assert all(isinstance(e, RiskEvent) for e in events)
        assert events[0].name == "Bedford Ave (L)"
        assert events[0].risk_level == "critical"
        assert events[0].timestamp == fixed_now - timedelta(hours=1)
        timestamps = [e.timestamp for e in events]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_active_alerts(self, store, fixed_now):
        alerts = store.get_active_alerts()

        assert [a.id for a in alerts] == ["1", "2"]
        assert all(isinstance(a, Alert) and a.is_active for a in alerts)
        assert alerts[0].type == "critical"
        assert alerts[0].timestamp == fixed_now - timedelta(hours=0.3)

    def test_feed_items_limit(self, store):
        items = store.get_recent_feed_items(limit=3)

        assert len(items) == 3
        assert all(isinstance(i, RiskFeedItem) for i in items)
        assert items[0].content == "surf the G tonight!"

    def test_feed_items_default_returns_all(self, store):
        assert len(store.get_recent_feed_items()) == 8

    def test_trend_data(self, store):
        trends = store.get_trend_data(limit=2)
        assert [t["date"] for t in trends] == ["Mon", "Tue"]

    def test_platform_metrics_camel_case(self, store):
        metrics = store.get_platform_metrics()

        assert metrics[0] == {"platform": "tiktok", "harmPercentage": 40.0, "safetyPercentage": 5.0}
        assert len(metrics) == 6

    def test_platform_insights_limit(self, store):
        assert len(store.get_platform_insights(limit=4)) == 4

    def test_custom_seed_file(self, tmp_path, fixed_now):
        path = tmp_path / "seed.yaml"
        path.write_text(
            "alerts:\n"
            "  - {id: 1, title: Old, type: info, is_active: false, age_hours: 2}\n"
            "  - {id: 2, title: New, type: warning, age_hours: 1}\n"
            "risk_locations: []\n"
        )

        store = SeedStore(path=path, now=fixed_now)

        assert [a.title for a in store.get_active_alerts()] == ["New"]
        assert store.get_risk_events() == []
        assert store.get_trend_data() == []
