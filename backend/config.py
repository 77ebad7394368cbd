"""Centralized configuration — all env vars in one place."""

import os

DEFAULT_SOURCE_BASE_URL = "https://www.4to40.com/astrology/"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.port: int = int(os.getenv("PORT", "8080"))
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Content source
        self.source_base_url: str = os.getenv("SOURCE_BASE_URL", DEFAULT_SOURCE_BASE_URL)
        self.fetch_timeout_seconds: float = float(os.getenv("FETCH_TIMEOUT_SECONDS", "20"))

        # Cache and refresh
        self.cache_ttl_hours: float = float(os.getenv("CACHE_TTL_HOURS", "12"))
        self.refresh_interval_hours: float = float(os.getenv("REFRESH_INTERVAL_HOURS", "24"))
        self.refresh_on_hit: bool = _env_bool("REFRESH_ON_HIT", True)
        self.coalesce_fetches: bool = _env_bool("COALESCE_FETCHES", True)
        self.warm_on_startup: bool = _env_bool("WARM_ON_STARTUP", True)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_hours * 3600

    @property
    def refresh_interval_seconds(self) -> float:
        return self.refresh_interval_hours * 3600

    def validate(self) -> list[str]:
        """Return list of settings that are out of range."""
        problems = []
        for var in ("CACHE_TTL_HOURS", "REFRESH_INTERVAL_HOURS", "FETCH_TIMEOUT_SECONDS"):
            if getattr(self, _attr_for(var)) <= 0:
                problems.append(var)
        return problems


settings = Settings()


def _attr_for(env_var: str) -> str:
    """Map env var name to Settings attribute name."""
    mapping = {
        "CACHE_TTL_HOURS": "cache_ttl_hours",
        "REFRESH_INTERVAL_HOURS": "refresh_interval_hours",
        "FETCH_TIMEOUT_SECONDS": "fetch_timeout_seconds",
    }
    return mapping.get(env_var, env_var.lower())
