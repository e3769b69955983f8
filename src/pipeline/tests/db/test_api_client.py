"""Tests for the dashboard API client.

Requests are served by an httpx.MockTransport so no network is used.
"""

import json

import httpx
import pytest

from surfwatch.db.client import ApiClient

BASE_URL = "http://dashboard.test"

ROUTES = {
    "/api/dashboard": {"riskLocations": [], "alerts": []},
    "/api/dashboard/trends": [{"date": d, "intent": i} for d, i in [("Mon", 1), ("Tue", 2), ("Wed", 3)]],
    "/api/dashboard/alerts": [
        {"id": 1, "title": "Surge", "type": "critical", "isActive": True, "timestamp": "2024-07-01T11:00:00Z"},
    ],
    "/api/dashboard/platforms": [{"platform": "tiktok", "harmPercentage": 40, "safetyPercentage": 5}],
    "/api/dashboard/risk-feed": [
        {"id": i, "content": f"post {i}", "classification": "intent", "platform": "tiktok"} for i in range(5)
    ],
    "/api/dashboard/insights": [{"platform": "Reddit", "content": "note"}],
    "/api/dashboard/risk-locations": [
        {"id": 1, "name": "Bedford Ave (L)", "latitude": 40.7167, "longitude": -73.9568, "riskLevel": "critical"},
        {"id": 2, "name": "Broken", "riskLevel": "high"},
    ],
}


def _make_client(requests=None, status_code=200) -> ApiClient:
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if request.method == "POST":
            body = json.loads(request.content)
            return httpx.Response(status_code, json={"riskScore": 80, "echo": body})
        if request.url.path not in ROUTES:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(status_code, json=ROUTES[request.url.path])

    return ApiClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


class TestApiClient:
    """Tests for ApiClient reads."""

    def test_get_dashboard(self):
        with _make_client() as api:
            assert api.get_dashboard() == ROUTES["/api/dashboard"]

    def test_health_check(self):
        requests = []
        with _make_client(requests) as api:
            assert api.health_check() == ROUTES["/api/dashboard"]
        assert requests[0].url.path == "/api/dashboard"

    def test_health_check_error_raised(self):
        with _make_client(status_code=503) as api:
            with pytest.raises(httpx.HTTPStatusError):
                api.health_check()

    def test_trend_limit(self):
        with _make_client() as api:
            assert [t["date"] for t in api.get_trend_data(limit=2)] == ["Mon", "Tue"]

    def test_alerts_parsed(self):
        with _make_client() as api:
            alerts = api.get_active_alerts()

        assert alerts[0].id == "1"
        assert alerts[0].is_active is True
        assert alerts[0].timestamp.isoformat() == "2024-07-01T11:00:00+00:00"

    def test_feed_items_limit(self):
        with _make_client() as api:
            items = api.get_recent_feed_items(limit=3)
        assert [i.content for i in items] == ["post 0", "post 1", "post 2"]

    def test_platform_metrics_and_insights(self):
        with _make_client() as api:
            assert api.get_platform_metrics()[0]["platform"] == "tiktok"
            assert api.get_platform_insights(limit=5) == ROUTES["/api/dashboard/insights"]

    def test_risk_events_skip_malformed(self):
        with _make_client() as api:
            events = api.get_risk_events()

        assert [e.id for e in events] == ["1"]
        assert events[0].risk_level == "critical"

    def test_http_error_raised(self):
        with _make_client(status_code=500) as api:
            with pytest.raises(httpx.HTTPStatusError):
                api.get_dashboard()

    def test_analyze_content_posts_json(self):
        requests = []
        with _make_client(requests) as api:
            result = api.analyze_content("surf the G tonight", "tiktok")

        assert result["echo"] == {"content": "surf the G tonight", "platform": "tiktok"}
        assert requests[0].url.path == "/api/analytics/analyze-content"

    def test_api_key_header(self, isolated_config):
        isolated_config.api.api_key = "secret"
        requests = []

        with _make_client(requests) as api:
            api.get_dashboard()

        assert requests[0].headers["X-Api-Key"] == "secret"

    def test_no_api_key_header_by_default(self):
        requests = []
        with _make_client(requests) as api:
            api.get_dashboard()
        assert "X-Api-Key" not in requests[0].headers

    def test_defaults_from_config(self, isolated_config):
        isolated_config.api.base_url = "http://configured.test/"
        api = ApiClient()
        assert api.base_url == "http://configured.test"
        assert api.timeout == 30.0

    def test_close_resets_client(self):
        api = _make_client()
        api.get_dashboard()
        api.close()
        assert api._client is None
