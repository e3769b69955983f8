"""Configuration management for the SurfWatch pipeline."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv


@dataclass
class RiskConfig:
    """Station risk assessment configuration."""

    proximity_radius_km: float = 2.0
    random_seed: int | None = None
    scoring_config_path: str | None = None


@dataclass
class TransitConfig:
    """Station directory configuration."""

    stations_url: str | None = None
    cache_ttl_seconds: float = 24 * 60 * 60
    timeout: float = 10.0


@dataclass
class ApiConfig:
    """Dashboard API connection configuration."""

    base_url: str = "http://localhost:5000"
    timeout: float = 30.0
    api_key: str = ""


@dataclass
class OpenAIConfig:
    """Language model configuration."""

    api_key: str = ""
    model: str = "gpt-4o"


@dataclass
class YouTubeConfig:
    """YouTube Data API configuration."""

    api_key: str = ""
    base_url: str = "https://www.googleapis.com/youtube/v3"
    lookback_days: int = 7
    max_results_per_query: int = 10
    timeout: float = 30.0


@dataclass
class Config:
    """Main configuration container."""

    risk: RiskConfig = field(default_factory=RiskConfig)
    transit: TransitConfig = field(default_factory=TransitConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    youtube: YouTubeConfig = field(default_factory=YouTubeConfig)

    @classmethod
    def load(cls, config_dir: Path | None = None) -> "Config":
        """Load configuration from files and environment variables."""
        env_file = Path(__file__).parent.parent / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        config = cls()

        if config_dir and config_dir.exists():
            settings_file = config_dir / "settings.yaml"
            if settings_file.exists():
                config._load_yaml(settings_file)

            risk_file = config_dir / "risk_scoring.yaml"
            if risk_file.exists() and config.risk.scoring_config_path is None:
                config.risk.scoring_config_path = str(risk_file)

        config._load_from_env()

        return config

    def _load_yaml(self, path: Path) -> None:
        """Load configuration from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
            if data:
                self._apply_yaml_config(data)

    def _apply_yaml_config(self, data: dict[str, Any]) -> None:
        """Apply YAML configuration data."""
        if "risk" in data:
            risk = data["risk"]
            if "proximity_radius_km" in risk:
                self.risk.proximity_radius_km = float(risk["proximity_radius_km"])
            if "random_seed" in risk:
                seed = risk["random_seed"]
                self.risk.random_seed = int(seed) if seed is not None else None
            if "scoring_config_path" in risk:
                self.risk.scoring_config_path = risk["scoring_config_path"]

        if "transit" in data:
            transit = data["transit"]
            if "stations_url" in transit:
                self.transit.stations_url = transit["stations_url"]
            if "cache_ttl_seconds" in transit:
                self.transit.cache_ttl_seconds = float(transit["cache_ttl_seconds"])
            if "timeout" in transit:
                self.transit.timeout = float(transit["timeout"])

        if "api" in data:
            api = data["api"]
            if "base_url" in api:
                self.api.base_url = api["base_url"]
            if "timeout" in api:
                self.api.timeout = float(api["timeout"])

        if "openai" in data:
            if "model" in data["openai"]:
                self.openai.model = data["openai"]["model"]

        if "youtube" in data:
            yt = data["youtube"]
            if "base_url" in yt:
                self.youtube.base_url = yt["base_url"]
            if "lookback_days" in yt:
                self.youtube.lookback_days = int(yt["lookback_days"])
            if "max_results_per_query" in yt:
                self.youtube.max_results_per_query = int(yt["max_results_per_query"])

    def _load_from_env(self) -> None:
        """Override configuration from environment variables."""
        # Risk
        if radius := os.getenv("PROXIMITY_RADIUS_KM"):
            self.risk.proximity_radius_km = float(radius)
        if seed := os.getenv("RISK_RANDOM_SEED"):
            self.risk.random_seed = int(seed)
        if scoring_path := os.getenv("RISK_SCORING_CONFIG"):
            self.risk.scoring_config_path = scoring_path

        # Transit
        if url := os.getenv("MTA_STATIONS_URL"):
            self.transit.stations_url = url
        if ttl := os.getenv("STATIONS_CACHE_TTL_SECONDS"):
            self.transit.cache_ttl_seconds = float(ttl)

        # Dashboard API
        if url := os.getenv("SURFWATCH_API_URL"):
            self.api.base_url = url
        if api_key := os.getenv("SURFWATCH_API_KEY"):
            self.api.api_key = api_key

        # OpenAI
        if api_key := os.getenv("OPENAI_API_KEY"):
            self.openai.api_key = api_key
        if model := os.getenv("OPENAI_MODEL"):
            self.openai.model = model

        # YouTube
        if api_key := os.getenv("YOUTUBE_API_KEY"):
            self.youtube.api_key = api_key
        if lookback := os.getenv("YOUTUBE_LOOKBACK_DAYS"):
            self.youtube.lookback_days = int(lookback)


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        config_dir = Path(__file__).parent.parent / "config"
        _config = Config.load(config_dir)
    return _config


def reload_config(config_dir: Path | None = None) -> Config:
    """Reload configuration (useful for testing)."""
    global _config
    _config = Config.load(config_dir)
    return _config
