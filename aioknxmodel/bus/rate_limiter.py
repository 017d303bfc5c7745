# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Sliding window rate limiting for bus gateways.

Bus couplers drop telegrams when flooded. RateLimitedGateway wraps any gateway
and delays writes and reads that exceed their budget within the window until
the oldest call has left it. Feedback subscriptions pass through unchanged.

Public API
----------
- SlidingWindowRateLimiter: Budget of calls per time window
- RateLimitedGateway: Gateway wrapper with separate write and read budgets
"""

from __future__ import annotations

import asyncio
from collections import deque
import logging
import time
from typing import TYPE_CHECKING, Any, Final

from aioknxmodel import i18n
from aioknxmodel.const import DEFAULT_RATE_LIMIT_WINDOW, DEFAULT_READ_RATE_LIMIT, DEFAULT_WRITE_RATE_LIMIT
from aioknxmodel.exceptions import KnxValidationException

if TYPE_CHECKING:
    from aioknxmodel.interfaces import BusGatewayProtocol
    from aioknxmodel.type_aliases import FeedbackHandler, UnsubscribeHandler

__all__ = ["RateLimitedGateway", "SlidingWindowRateLimiter"]

_LOGGER: Final = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Allow at most `limit` acquisitions within any `window` seconds."""

    __slots__ = ("_calls", "_limit", "_lock", "_name", "_window")

    def __init__(self, *, name: str, limit: int, window: float) -> None:
        """Initialize the limiter."""
        if limit < 1 or window <= 0:
            raise KnxValidationException(
                i18n.tr("exception.bus.rate_limiter.invalid_budget", name=name, limit=limit, window=window)
            )
        self._name: Final = name
        self._limit: Final = limit
        self._window: Final = window
        self._calls: deque[float] = deque()
        self._lock: Final = asyncio.Lock()

    @property
    def current_usage(self) -> int:
        """Return the number of calls inside the current window."""
        self._prune(now=time.monotonic())
        return len(self._calls)

    @property
    def limit(self) -> int:
        """Return the call budget per window."""
        return self._limit

    async def acquire(self) -> None:
        """Wait until a call is allowed and record it."""
        async with self._lock:
            while True:
                now = time.monotonic()
                self._prune(now=now)
                if len(self._calls) < self._limit:
                    self._calls.append(now)
                    return
                delay = self._calls[0] + self._window - now
                _LOGGER.debug("RATE_LIMIT: %s: Budget exhausted, waiting %.3fs", self._name, delay)
                await asyncio.sleep(delay)

    def reset(self) -> None:
        """Forget all recorded calls."""
        self._calls.clear()

    def _prune(self, *, now: float) -> None:
        while self._calls and now - self._calls[0] >= self._window:
            self._calls.popleft()


class RateLimitedGateway:
    """Gateway wrapper enforcing write and read budgets."""

    __slots__ = ("_gateway", "_read_limiter", "_write_limiter")

    def __init__(
        self,
        *,
        gateway: BusGatewayProtocol,
        write_limit: int = DEFAULT_WRITE_RATE_LIMIT,
        read_limit: int = DEFAULT_READ_RATE_LIMIT,
        window: float = DEFAULT_RATE_LIMIT_WINDOW,
    ) -> None:
        """Initialize the wrapper."""
        self._gateway: Final = gateway
        self._write_limiter: Final = SlidingWindowRateLimiter(name="write", limit=write_limit, window=window)
        self._read_limiter: Final = SlidingWindowRateLimiter(name="read", limit=read_limit, window=window)

    @property
    def read_limiter(self) -> SlidingWindowRateLimiter:
        """Return the read limiter."""
        return self._read_limiter

    @property
    def write_limiter(self) -> SlidingWindowRateLimiter:
        """Return the write limiter."""
        return self._write_limiter

    async def request_value(self, *, address: str, value_type: type) -> Any:
        """Read a value once the read budget allows it."""
        await self._read_limiter.acquire()
        return await self._gateway.request_value(address=address, value_type=value_type)

    def subscribe_feedback(self, *, handler: FeedbackHandler) -> UnsubscribeHandler:
        """Subscribe to the wrapped gateway's feedback stream."""
        return self._gateway.subscribe_feedback(handler=handler)

    async def write_value(self, *, address: str, value: bool | float | bytes) -> None:
        """Write a value once the write budget allows it."""
        await self._write_limiter.acquire()
        await self._gateway.write_value(address=address, value=value)
