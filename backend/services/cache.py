"""Single-slot refresh cache for the station FeatureCollection.

One value, one timestamp. Staleness depends only on how long ago the last
refresh *started*; the cache never expires its value, it only reports when a
refresh is due.

Note: Each uvicorn worker has its own cache instance. With --workers 2,
the feed may be fetched twice per interval (once per worker).
"""

import time
from typing import Any


def now_ms() -> int:
    return int(time.time() * 1000)


class RefreshCache:
    def __init__(self, refetch_interval_ms: int = 30_000):
        self.refetch_interval_ms = refetch_interval_ms
        self.last_fetch_time_ms: int = 0
        self.value: Any | None = None

    def is_stale(self, at_ms: int) -> bool:
        # A zero stamp means no refresh has started (or the only one failed).
        if self.last_fetch_time_ms == 0:
            return True
        # Strictly greater: exactly one interval after the stamp is still fresh.
        return at_ms > self.last_fetch_time_ms + self.refetch_interval_ms

    def mark_refresh_started(self, at_ms: int) -> int:
        """Stamp a refresh at ``at_ms`` and return the stamp it replaced."""
        previous = self.last_fetch_time_ms
        self.last_fetch_time_ms = at_ms
        return previous

    def release(self, stamp_ms: int, previous_ms: int) -> bool:
        """Undo a failed refresh's stamp so the next request retries.

        Leaves the stamp alone when a newer refresh has stamped since.
        """
        if self.last_fetch_time_ms != stamp_ms:
            return False
        self.last_fetch_time_ms = previous_ms
        return True

    def store(self, value: Any) -> None:
        self.value = value
