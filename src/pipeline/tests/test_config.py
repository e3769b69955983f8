"""Tests for configuration loading."""

from pathlib import Path

import surfwatch.config as config_module
from surfwatch.config import Config, get_config, reload_config

BUNDLED_CONFIG_DIR = Path(config_module.__file__).parent.parent / "config"


class TestConfig:
    """Tests for Config.load and the global accessors."""

    def test_defaults(self):
        config = Config()

        assert config.risk.proximity_radius_km == 2.0
        assert config.risk.random_seed is None
        assert config.transit.cache_ttl_seconds == 86400
        assert config.api.base_url == "http://localhost:5000"
        assert config.youtube.lookback_days == 7

    def test_yaml_settings(self, tmp_path):
        (tmp_path / "settings.yaml").write_text(
            "risk:\n"
            "  proximity_radius_km: 1.5\n"
            "  random_seed: 7\n"
            "transit:\n"
            "  stations_url: https://stations.example.com\n"
            "  cache_ttl_seconds: 600\n"
            "api:\n"
            "  base_url: http://api.test\n"
            "openai:\n"
            "  model: small-model\n"
            "youtube:\n"
            "  max_results_per_query: 25\n"
        )

        config = Config.load(tmp_path)

        assert config.risk.proximity_radius_km == 1.5
        assert config.risk.random_seed == 7
        assert config.transit.stations_url == "https://stations.example.com"
        assert config.transit.cache_ttl_seconds == 600
        assert config.api.base_url == "http://api.test"
        assert config.openai.model == "small-model"
        assert config.youtube.max_results_per_query == 25

    def test_scoring_file_discovered(self, tmp_path):
        (tmp_path / "risk_scoring.yaml").write_text("hotspots: {}\n")

        config = Config.load(tmp_path)

        assert config.risk.scoring_config_path == str(tmp_path / "risk_scoring.yaml")

    def test_env_overrides_yaml(self, tmp_path, monkeypatch):
        (tmp_path / "settings.yaml").write_text("risk:\n  proximity_radius_km: 1.5\n")
        monkeypatch.setenv("PROXIMITY_RADIUS_KM", "3.25")
        monkeypatch.setenv("RISK_RANDOM_SEED", "11")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("YOUTUBE_API_KEY", "yt-test")
        monkeypatch.setenv("SURFWATCH_API_URL", "http://env.test")

        config = Config.load(tmp_path)

        assert config.risk.proximity_radius_km == 3.25
        assert config.risk.random_seed == 11
        assert config.openai.api_key == "sk-test"
        assert config.youtube.api_key == "yt-test"
        assert config.api.base_url == "http://env.test"

    def test_missing_directory(self, tmp_path):
        config = Config.load(tmp_path / "missing")
        assert config.risk.proximity_radius_km == 2.0

    def test_bundled_config(self):
        config = Config.load(BUNDLED_CONFIG_DIR)

        assert config.risk.proximity_radius_km == 2.0
        assert config.risk.scoring_config_path.endswith("risk_scoring.yaml")

    def test_reload_config_replaces_global(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("risk:\n  proximity_radius_km: 0.5\n")

        reloaded = reload_config(tmp_path)

        assert get_config() is reloaded
        assert get_config().risk.proximity_radius_km == 0.5
