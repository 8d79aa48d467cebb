from __future__ import annotations

import asyncio
import time
from collections import deque
from typing import Awaitable, Callable

from ..logging_config import logger


class RateLimiter:
    """Sliding-window limiter: at most ``max_calls`` admissions per ``per_seconds``.

    ``admit`` never fails; it suspends the caller until the oldest admission in
    the window has aged out. The lock is held across that wait, so callers are
    admitted in the order they asked.
    """

    def __init__(
        self,
        max_calls: int = 10,
        per_seconds: float = 1.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_calls < 1:
            raise ValueError("max_calls must be at least 1")
        if per_seconds <= 0:
            raise ValueError("per_seconds must be positive")
        self.max_calls = max_calls
        self.per_seconds = per_seconds
        self._clock = clock
        self._sleep = sleep
        self._window: deque[float] = deque()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._window)

    async def admit(self) -> None:
        async with self._lock:
            now = self._clock()
            window_start = now - self.per_seconds
            while self._window and self._window[0] < window_start:
                self._window.popleft()
            if len(self._window) < self.max_calls:
                self._window.append(now)
                return
            wait = self._window[0] - window_start
            if wait > 0:
                logger.debug("rate_limiter.wait", wait_seconds=round(wait, 4), in_window=len(self._window))
                await self._sleep(wait)
            self._window.popleft()
            self._window.append(self._clock())
