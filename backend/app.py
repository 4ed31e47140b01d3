"""FastAPI application entry point for the bikeshare station relay."""

import logging
import sys
from functools import partial

import uvicorn
from fastapi import FastAPI

from config import Settings, settings
from errors import register_error_handlers
from services.cache import RefreshCache
from services.station_feed import StationFeed
from services.stations import fetch_feed

# Structured logging: JSON for production, human-readable for local
if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings | None = None, station_feed: StationFeed | None = None) -> FastAPI:
    app_settings = app_settings or settings
    app = FastAPI(title="Bikeshare Station Relay", version="1.0.0")

    if station_feed is None:
        station_feed = StationFeed(
            fetch=partial(fetch_feed, app_settings.feed_url, app_settings.fetch_timeout_seconds),
            cache=RefreshCache(refetch_interval_ms=app_settings.refetch_interval_ms),
        )
    app.state.station_feed = station_feed

    # Centralized error handlers
    register_error_handlers(app)

    from routes.stations import router as stations_router

    app.include_router(stations_router)

    @app.on_event("startup")
    async def _validate_config() -> None:
        problems = app_settings.validate()
        if problems:
            logger.warning("Configuration problems: %s", "; ".join(problems))
        logger.info(
            "Relaying %s (refetch every %ss)",
            app_settings.feed_url,
            app_settings.refetch_interval_seconds,
        )

    return app


app = create_app()


def main() -> None:
    logger.info("Server running at http://%s:%d/", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
