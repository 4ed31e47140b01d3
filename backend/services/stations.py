"""Bikeshare station feed client and GeoJSON transform.

The upstream feed is a single JSON document whose stations live under
``stationBeanList``. Each station becomes one GeoJSON Point feature, with the
whole station record kept as the feature's properties.
"""

import logging
from numbers import Real
from typing import Any

import httpx

from errors import FeedFormatError, UpstreamFeedError, UpstreamTimeoutError

logger = logging.getLogger(__name__)

# Where the feed keeps its stations
STATION_LIST_KEY = "stationBeanList"


def _coordinate(station: dict, field: str, index: int) -> float:
    value = station.get(field)
    # bool is a subclass of int but never a coordinate
    if isinstance(value, bool) or not isinstance(value, Real):
        raise FeedFormatError(f"Station {index} has no numeric {field}: {value!r}")
    return value


def transform_station(station: dict, index: int = 0) -> dict:
    """Turn one feed station into a GeoJSON Point feature."""
    if not isinstance(station, dict):
        raise FeedFormatError(f"Station {index} is not an object")
    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": [
                _coordinate(station, "longitude", index),
                _coordinate(station, "latitude", index),
            ],
        },
        "properties": station,
    }


def transform_feed(raw: Any) -> dict:
    """Transform a raw station feed into a GeoJSON FeatureCollection.

    Features keep the feed's station order. Raises FeedFormatError when the
    station list is missing or any station lacks numeric coordinates.
    """
    if not isinstance(raw, dict) or not isinstance(raw.get(STATION_LIST_KEY), list):
        raise FeedFormatError(f"Station feed has no '{STATION_LIST_KEY}' list")

    return {
        "type": "FeatureCollection",
        "features": [
            transform_station(station, index)
            for index, station in enumerate(raw[STATION_LIST_KEY])
        ],
    }


async def fetch_feed(url: str, timeout_seconds: float) -> Any:
    """GET the raw station feed and decode its JSON body."""
    try:
        async with httpx.AsyncClient(timeout=timeout_seconds) as client:
            resp = await client.get(url)
            resp.raise_for_status()
    except httpx.TimeoutException as e:
        logger.warning("Station feed timed out after %ss: %s", timeout_seconds, url)
        raise UpstreamTimeoutError(url, timeout_seconds) from e
    except httpx.HTTPError as e:
        logger.warning("Station feed fetch failed for %s: %s", url, e)
        raise UpstreamFeedError(f"Station feed fetch failed: {e}") from e

    try:
        return resp.json()
    except ValueError as e:
        raise FeedFormatError(f"Station feed is not valid JSON: {e}") from e
