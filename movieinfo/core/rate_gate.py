import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RateGate:
    """Sliding-window limiter: at most ``capacity`` dispatches in any ``window_seconds``.

    Calls over the limit are not rejected. They wait until the oldest recorded
    dispatch leaves the window and then try again. Failures of the dispatched
    call itself are never retried.
    """

    def __init__(
        self,
        capacity: int = 30,
        window_seconds: float = 11.0,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.capacity = capacity
        self.window_seconds = window_seconds
        self._clock = clock
        self._sleep = sleep
        # most recent first
        self._timestamps: deque[float] = deque()

    def _now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return asyncio.get_running_loop().time()

    def _reserve(self) -> float:
        # No await in here: the check and the mutation happen in one event loop step.
        now = self._now()
        if len(self._timestamps) < self.capacity:
            self._timestamps.appendleft(now)
            return 0.0

        elapsed = now - self._timestamps[-1]
        if elapsed < self.window_seconds:
            return self.window_seconds - elapsed

        self._timestamps.pop()
        self._timestamps.appendleft(now)
        return 0.0

    async def dispatch(self, call: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        while True:
            delay = self._reserve()
            if delay <= 0:
                break
            logger.debug(
                "Rate gate deferring dispatch",
                extra={"delay_seconds": round(delay, 3), "capacity": self.capacity, "window_seconds": self.window_seconds},
            )
            await self._sleep(delay)
        return await call(*args, **kwargs)
