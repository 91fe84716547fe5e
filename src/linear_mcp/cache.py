"""In-memory TTL caches for name resolution and workspace metadata."""
import time
from typing import Any, Callable, Optional

DEFAULT_TTL_SECONDS = 300.0


class TTLCache:
    """Key/value cache where each entry expires a fixed time after it was written.

    Expired entries are evicted lazily on lookup. Writing a key replaces the
    previous payload and resets its expiry.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is not None and entry[1] > self._clock():
            return entry[0]
        self._entries.pop(key, None)
        return None

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (value, self._clock() + self.ttl_seconds)

    def __len__(self) -> int:
        return len(self._entries)


class SnapshotCache:
    """Single-slot TTL cache (one workspace per process, so no key)."""

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Optional[Any] = None
        self._expires = 0.0

    def get(self) -> Optional[Any]:
        if self._value is not None and self._expires > self._clock():
            return self._value
        self._value = None
        return None

    def set(self, value: Any) -> None:
        self._value = value
        self._expires = self._clock() + self.ttl_seconds
