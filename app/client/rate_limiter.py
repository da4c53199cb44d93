"""Client-side request limiter.

Mirrors the server's limit so a client can refuse a search locally instead of
paying for a round trip. It is advisory: the server limit is the one enforced.
Usage timestamps live in a small key/value store owned by the client (one per
user profile). Without a usable store the limiter allows everything.
"""

import json
import os
import threading
import time
from typing import Callable, Dict, List, Optional, Protocol

from app.utils.logger import get_logger

logger = get_logger(__name__)

STORAGE_KEY = "movie_recommendation_requests"


class RequestStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Storage kept in memory, for one interactive session."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """Storage persisted to a JSON file, e.g. ~/.movie_recs/state.json."""

    def __init__(self, path: str):
        self.path = os.path.expanduser(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)


class ClientRateLimiter:
    """At most `max_requests` searches within the trailing `window_seconds`.

    `check_limit` both checks and records a usage, so calling it consumes a slot
    whenever the search is allowed.
    """

    def __init__(
        self,
        storage: Optional[RequestStorage],
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock

    @property
    def enabled(self) -> bool:
        return self.storage is not None

    def _safe_get(self) -> Optional[str]:
        try:
            return self.storage.get_item(STORAGE_KEY)
        except (OSError, ValueError) as e:
            logger.debug("Request storage unavailable: %s", repr(e))
            return None

    def _safe_set(self, value: str) -> None:
        try:
            self.storage.set_item(STORAGE_KEY, value)
        except (OSError, ValueError) as e:
            logger.debug("Could not persist request usage: %s", repr(e))

    def _valid_requests(self, now: float) -> List[float]:
        raw = self._safe_get()
        try:
            timestamps = json.loads(raw) if raw else []
        except ValueError:
            timestamps = []
        if not isinstance(timestamps, list):
            return []
        return [ts for ts in timestamps if isinstance(ts, (int, float)) and now - ts < self.window_seconds]

    def check_limit(self) -> bool:
        if not self.enabled:
            return True
        now = self._clock()
        valid = self._valid_requests(now)
        if len(valid) >= self.max_requests:
            return False
        valid.append(now)
        self._safe_set(json.dumps(valid))
        return True

    def record_request(self) -> None:
        """Record a usage without checking the limit."""
        if not self.enabled:
            return
        now = self._clock()
        valid = self._valid_requests(now)
        valid.append(now)
        self._safe_set(json.dumps(valid))

    def get_remaining_requests(self) -> int:
        if not self.enabled:
            return self.max_requests
        return max(0, self.max_requests - len(self._valid_requests(self._clock())))

    def get_current_count(self) -> int:
        if not self.enabled:
            return 0
        return len(self._valid_requests(self._clock()))

    def reset(self) -> None:
        """Forget all recorded usage (the user went back to the search screen)."""
        if not self.enabled:
            return
        try:
            self.storage.remove_item(STORAGE_KEY)
        except (OSError, ValueError) as e:
            logger.debug("Could not clear request usage: %s", repr(e))
