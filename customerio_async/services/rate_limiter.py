"""In-process token-bucket admission control for outgoing API calls."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from enum import Enum

logger = logging.getLogger(__name__)


class RefillPolicy(str, Enum):
    """How consumed slots come back.

    ``ROLLING`` returns each slot exactly one interval after it was granted,
    so no window of that length ever sees more than ``limit`` grants.
    ``FIXED`` refills the whole bucket once per interval, starting from the
    first grant of a window.
    """

    ROLLING = "rolling"
    FIXED = "fixed"


class TokenBucketRateLimiter:
    """FIFO token-bucket limiter for a single asyncio event loop.

    State is only touched from ``acquire()`` and the limiter's own timer
    callbacks, all of which run on the loop thread, so no lock is needed.
    """

    def __init__(
        self,
        limit: int,
        interval: float = 1.0,
        policy: RefillPolicy | str = RefillPolicy.ROLLING,
    ) -> None:
        if limit < 1:
            raise ValueError(f"limit must be a positive integer, got {limit!r}")
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval!r}")
        self._limit = limit
        self._interval = interval
        self._policy = RefillPolicy(policy)
        self._available = limit
        self._waiters: deque[asyncio.Future[None]] = deque()
        self._window: asyncio.TimerHandle | None = None

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def policy(self) -> RefillPolicy:
        return self._policy

    @property
    def available(self) -> int:
        return self._available

    @property
    def pending(self) -> int:
        """Number of callers currently queued for a slot."""
        return len(self._waiters)

    async def acquire(self) -> None:
        """Wait until a slot is free, then consume it.

        Returns without suspending when a slot is free and nobody is queued.
        A caller cancelled while queued leaves the queue without consuming a
        slot. A slot granted in the same tick as the cancellation goes to the
        next queued caller; once ``acquire`` has returned, the slot is never
        refunded early.
        """
        if self._available > 0 and not self._waiters:
            self._grant()
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        logger.debug(
            "Rate limit reached (%d/%.3gs), %d caller(s) queued",
            self._limit, self._interval, len(self._waiters),
        )
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter in self._waiters:
                self._waiters.remove(waiter)
            elif waiter.done() and not waiter.cancelled():
                # Granted in the same tick the caller gave up; pass the slot on.
                self._available += 1
                self._release_waiters()
            raise

    # -- internal ------------------------------------------------------------

    def _grant(self) -> None:
        self._available -= 1
        loop = asyncio.get_running_loop()
        if self._policy is RefillPolicy.ROLLING:
            loop.call_later(self._interval, self._replenish)
        elif self._window is None:
            self._window = loop.call_later(self._interval, self._reset_window)

    def _replenish(self) -> None:
        self._available = min(self._available + 1, self._limit)
        self._release_waiters()

    def _reset_window(self) -> None:
        self._window = None
        self._available = self._limit
        self._release_waiters()

    def _release_waiters(self) -> None:
        while self._available > 0 and self._waiters:
            waiter = self._waiters.popleft()
            # Cancelled callers remove themselves, but the cancellation may
            # not have been delivered to their task yet.
            if waiter.done():
                continue
            self._grant()
            waiter.set_result(None)
            logger.debug("Released queued caller, %d still waiting", len(self._waiters))
