"""Simple in-memory TTL cache. No Redis needed.

Expiry is lazy: an entry past its TTL reads as missing but stays in the map
until the next successful fetch overwrites it. There is no delete.

Note: Each uvicorn worker has its own cache instance, warmed by its own
scheduler. With --workers 2 every sign is fetched once per worker.
"""

import threading
import time
from typing import Callable

DEFAULT_TTL_SECONDS = 12 * 3600

FIELDS = ("title", "body")


def cache_key(sign: str, field: str) -> str:
    if field not in FIELDS:
        raise ValueError(f"Unknown field: {field}. Expected one of {FIELDS}")
    return f"{sign}:{field}"


class TTLCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._store: dict[str, tuple[float, str]] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._store.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() <= expires_at:
            return value
        return None

    def set(self, key: str, value: str) -> None:
        expires_at = self._clock() + self.ttl_seconds
        with self._lock:
            self._store[key] = (expires_at, value)

    def stats(self) -> dict:
        now = self._clock()
        with self._lock:
            expiries = [expires_at for expires_at, _ in self._store.values()]
        return {
            "entries": len(expiries),
            "fresh": sum(1 for expires_at in expiries if now <= expires_at),
            "ttl_seconds": self.ttl_seconds,
        }
