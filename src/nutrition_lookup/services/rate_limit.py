"""Per-source request spacing."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field


@dataclass
class RateLimiter:
    """Guarantees a minimum interval between successive ``wait`` returns.

    This is sequential throttling, not a token bucket: concurrent callers queue
    on a lock and leave one interval apart. Use one instance per source.
    """

    interval_seconds: float
    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    _last_call: float | None = field(default=None, init=False, repr=False)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def wait(self) -> None:
        """Suspend until the interval since the previous call has elapsed."""
        async with self._lock:
            if self._last_call is not None:
                remaining = self.interval_seconds - (self.clock() - self._last_call)
                if remaining > 0:
                    await self.sleep(remaining)
            self._last_call = self.clock()
