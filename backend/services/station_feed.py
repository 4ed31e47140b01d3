"""Refresh policy for the cached station FeatureCollection.

A request that finds the cache stale stamps it immediately, starts a refresh
task and waits for that task. Requests arriving while the refresh is in
flight see a fresh stamp and get whatever is already cached (possibly None),
so at most one upstream fetch runs per refetch interval.

On a failed refresh the stamp is rolled back so the next request retries.
The triggering request gets the previous collection when there is one,
otherwise the upstream error propagates (502/504).
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from errors import UpstreamFeedError
from services.cache import RefreshCache, now_ms
from services.stations import transform_feed

logger = logging.getLogger(__name__)

FeedFetcher = Callable[[], Awaitable[Any]]


class StationFeed:
    def __init__(
        self,
        fetch: FeedFetcher,
        cache: RefreshCache | None = None,
        clock: Callable[[], int] = now_ms,
    ):
        self._fetch = fetch
        self.cache = cache if cache is not None else RefreshCache()
        self._clock = clock
        # The event loop only keeps weak references to tasks.
        self._refreshes: set[asyncio.Task] = set()

    async def handle_request(self, at_ms: int | None = None) -> dict | None:
        """Return the collection to serve for a request arriving at ``at_ms``."""
        if at_ms is None:
            at_ms = self._clock()

        if not self.cache.is_stale(at_ms):
            logger.info(
                "No need to refetch; last was less than %ss ago",
                self.cache.refetch_interval_ms / 1000,
            )
            return self.cache.value

        logger.info("Time for a refetch")
        previous_ms = self.cache.mark_refresh_started(at_ms)
        task = asyncio.ensure_future(self._refresh(at_ms, previous_ms))
        self._refreshes.add(task)
        task.add_done_callback(self._refresh_done)

        try:
            # Shielded so a disconnecting client does not abort the refresh.
            return await asyncio.shield(task)
        except UpstreamFeedError as e:
            if self.cache.value is None:
                raise
            logger.warning("Serving stale stations after failed refresh: %s", e)
            return self.cache.value

    async def _refresh(self, stamp_ms: int, previous_ms: int) -> dict:
        try:
            collection = transform_feed(await self._fetch())
        except UpstreamFeedError as e:
            if self.cache.release(stamp_ms, previous_ms):
                logger.info("Refresh failed, next request will refetch")
            logger.error("Station refresh failed: %s", e)
            raise

        self.cache.store(collection)
        logger.info("Cached %d stations", len(collection["features"]))
        return collection

    def _refresh_done(self, task: asyncio.Task) -> None:
        self._refreshes.discard(task)
        # Mark the outcome as retrieved; the requester may have disconnected.
        if not task.cancelled():
            task.exception()
