"""Queue-based rate governor for outbound Linear API calls.

Every network call goes through ``RateGovernor.governed``. Admission is
bounded by a sliding window: at most ``limit`` calls may start within any
trailing ``window_seconds``. Callers that arrive while the window is full
wait in a FIFO queue, released by a drain callback scheduled for the moment
the oldest admission leaves the window.

All window and queue mutations happen in synchronous sections on the event
loop, so concurrent tool calls never interleave inside them.
"""
import asyncio
import logging
from collections import deque
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger("linear-mcp.rate_limiter")

T = TypeVar("T")

MAX_REQUESTS_PER_MINUTE = 80
WINDOW_SECONDS = 60.0
DRAIN_MARGIN_SECONDS = 0.01


class RateGovernor:
    """Sliding-window admission control with fair (FIFO) queuing."""

    def __init__(
        self,
        limit: int = MAX_REQUESTS_PER_MINUTE,
        window_seconds: float = WINDOW_SECONDS,
        margin_seconds: float = DRAIN_MARGIN_SECONDS
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.limit = limit
        self.window_seconds = window_seconds
        self.margin_seconds = margin_seconds
        self._timestamps: deque[float] = deque()
        self._queue: deque[asyncio.Future] = deque()
        self._drain_handle: Optional[asyncio.TimerHandle] = None

    @property
    def used(self) -> int:
        self._purge(self._now())
        return len(self._timestamps)

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def drain_scheduled(self) -> bool:
        return self._drain_handle is not None

    def stats(self) -> dict[str, int]:
        return {"pending": self.pending, "used": self.used, "limit": self.limit}

    async def governed(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run ``operation`` once a slot in the window is available.

        The operation's result or exception is passed through unchanged.
        """
        now = self._now()
        self._purge(now)

        if not self._queue and len(self._timestamps) < self.limit:
            self._timestamps.append(now)
            return await operation()

        waiter = asyncio.get_running_loop().create_future()
        self._queue.append(waiter)
        if self._drain_handle is None:
            self._schedule_drain(now)
        logger.debug(f"Rate limit reached, queued request ({len(self._queue)} pending)")

        await waiter
        return await operation()

    def _now(self) -> float:
        return asyncio.get_running_loop().time()

    def _purge(self, now: float) -> None:
        cutoff = now - self.window_seconds
        while self._timestamps and self._timestamps[0] < cutoff:
            self._timestamps.popleft()

    def _schedule_drain(self, now: float) -> None:
        delay = self._timestamps[0] + self.window_seconds - now + self.margin_seconds
        self._drain_handle = asyncio.get_running_loop().call_later(max(delay, 0.0), self._drain)

    def _drain(self) -> None:
        self._drain_handle = None
        while self._queue:
            now = self._now()
            self._purge(now)
            if len(self._timestamps) >= self.limit:
                self._schedule_drain(now)
                return

            waiter = self._queue.popleft()
            if waiter.done():
                # Caller was cancelled while waiting
                continue
            self._timestamps.append(now)
            waiter.set_result(None)

