"""Centralized configuration — all env vars in one place."""

import os

DEFAULT_FEED_URL = "https://feeds.bayareabikeshare.com/stations/stations.json"


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # HTTP listener
        self.host: str = os.getenv("HOST", "127.0.0.1")
        self.port: int = int(os.getenv("PORT", "3001"))

        # Upstream station feed
        self.feed_url: str = os.getenv("STATIONS_FEED_URL", DEFAULT_FEED_URL)
        self.refetch_interval_seconds: float = float(os.getenv("REFETCH_INTERVAL_SECONDS", "30"))
        self.fetch_timeout_seconds: float = float(os.getenv("FETCH_TIMEOUT_SECONDS", "10"))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def refetch_interval_ms(self) -> int:
        return int(self.refetch_interval_seconds * 1000)

    def validate(self) -> list[str]:
        """Return list of configuration problems, empty when usable."""
        problems = []
        if not self.feed_url.startswith(("https://", "http://")):
            problems.append(f"STATIONS_FEED_URL is not an http(s) URL: {self.feed_url!r}")
        if self.refetch_interval_seconds <= 0:
            problems.append("REFETCH_INTERVAL_SECONDS must be positive")
        if self.fetch_timeout_seconds <= 0:
            problems.append("FETCH_TIMEOUT_SECONDS must be positive")
        return problems


settings = Settings()
