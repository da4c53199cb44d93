"""Fixed-window request limiter keyed by client identifier.

State is process-local: it does not survive a restart and is not shared between
worker processes. A deployment that needs one limit across processes must move
the counters to a shared store.
"""

import threading
import time
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional

from app.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class RateLimitEntry:
    count: int
    reset_time: float


class ServerRateLimiter:
    """Allow at most `max_requests` per `window_seconds` for each identifier."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._store: Dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def check_limit(self, identifier: str) -> bool:
        """Record a request for `identifier` and return whether it is allowed.

        A denied request is not counted.
        """
        now = self._clock()
        with self._lock:
            entry = self._store.get(identifier)
            if entry is None or now > entry.reset_time:
                # first request or window expired
                self._store[identifier] = RateLimitEntry(count=1, reset_time=now + self.window_seconds)
                return True

            if entry.count >= self.max_requests:
                return False

            entry.count += 1
            return True

    def get_remaining(self, identifier: str) -> int:
        now = self._clock()
        with self._lock:
            entry = self._store.get(identifier)
            if entry is None or now > entry.reset_time:
                return self.max_requests
            return max(0, self.max_requests - entry.count)

    def get_entry(self, identifier: str) -> Optional[RateLimitEntry]:
        """Return a copy of the stored entry, or None when the identifier is unseen."""
        with self._lock:
            entry = self._store.get(identifier)
            return replace(entry) if entry is not None else None

    def cleanup(self) -> int:
        """Drop entries whose window has expired. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._store.items() if now > entry.reset_time]
            for key in expired:
                del self._store[key]
        if expired:
            logger.info("Rate limiter cleanup removed %s expired entries", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
