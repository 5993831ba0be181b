"""
Global request-rate ceiling shared by every fetch worker.
"""
from __future__ import annotations

import asyncio
import time
from typing import Optional


class RateLimiter:
    """Spaces fetch starts at least ``1 / max_per_second`` seconds apart.

    The lock is held while sleeping, so concurrent callers queue up and the
    ceiling holds for the whole crawl, not per worker.
    """

    def __init__(self, max_per_second: float) -> None:
        if max_per_second <= 0:
            raise ValueError("max_per_second must be > 0")
        self.interval = 1.0 / max_per_second
        self._lock = asyncio.Lock()
        self._last_start: Optional[float] = None
        self.calls = 0

    async def throttle(self) -> None:
        async with self._lock:
            now = time.monotonic()
            if self._last_start is not None:
                wait = self.interval - (now - self._last_start)
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last_start = time.monotonic()
            self.calls += 1

    async def __aenter__(self) -> RateLimiter:
        await self.throttle()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None
