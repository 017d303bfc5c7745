# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Command/confirmation engine.

Every state changing command follows the same pattern: write a value to a
control address, then poll a predicate over local state until it holds or the
timeout elapses. The engine never subscribes to feedback itself; the local
state it polls is assigned exclusively by the capabilities' feedback handlers.

A timeout is reported by returning False and logging a warning. It never
raises and never cancels the write that was already sent.

Public API
----------
- ConfirmationEngine: Write and confirm primitives of one device
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
import time
from typing import TYPE_CHECKING, Final

from aioknxmodel.const import DEFAULT_PERCENTAGE_TOLERANCE, DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT
from aioknxmodel.support import is_within_tolerance

if TYPE_CHECKING:
    from aioknxmodel.interfaces import BusGatewayProtocol
    from aioknxmodel.type_aliases import Predicate

__all__ = ["ConfirmationEngine"]

_LOGGER: Final = logging.getLogger(__name__)


class ConfirmationEngine:
    """Write values and wait for their confirmation through feedback."""

    __slots__ = ("_default_timeout", "_gateway", "_name", "_poll_interval", "_tolerance")

    def __init__(
        self,
        *,
        gateway: BusGatewayProtocol,
        name: str,
        default_timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        tolerance: float = DEFAULT_PERCENTAGE_TOLERANCE,
    ) -> None:
        """Initialize the engine."""
        self._gateway: Final = gateway
        self._name: Final = name
        self._default_timeout: Final = default_timeout
        self._poll_interval: Final = poll_interval
        self._tolerance: Final = tolerance

    @property
    def default_timeout(self) -> float:
        """Return the timeout used when a caller passes none."""
        return self._default_timeout

    @property
    def gateway(self) -> BusGatewayProtocol:
        """Return the gateway the engine writes to."""
        return self._gateway

    @property
    def poll_interval(self) -> float:
        """Return the predicate polling interval."""
        return self._poll_interval

    @property
    def tolerance(self) -> float:
        """Return the default percentage tolerance."""
        return self._tolerance

    async def set_and_confirm(
        self,
        *,
        address: str,
        value: bool | float | bytes,
        predicate: Predicate,
        timeout: float | None = None,
        description: str,
    ) -> bool:
        """
        Write value to address and wait for predicate.

        The write is performed even if the predicate already holds.
        Communication errors of the write propagate to the caller.
        """
        _LOGGER.debug("SET_AND_CONFIRM: %s: Writing %s to %s", self._name, value, address)
        await self._gateway.write_value(address=address, value=value)
        return await self.wait_for(predicate=predicate, timeout=timeout, description=description)

    async def set_bit_and_confirm(
        self,
        *,
        address: str,
        value: bool,
        current: Callable[[], bool | None],
        timeout: float | None = None,
        description: str,
    ) -> bool:
        """Write a boolean and wait until the observed value equals it."""
        return await self.set_and_confirm(
            address=address,
            value=value,
            predicate=lambda: current() == value,
            timeout=timeout,
            description=description,
        )

    async def set_percentage_and_confirm(
        self,
        *,
        address: str,
        value: float,
        current: Callable[[], float | None],
        tolerance: float | None = None,
        timeout: float | None = None,
        description: str,
    ) -> bool:
        """Write a percentage and wait until the observed value is within tolerance."""
        allowed = self._tolerance if tolerance is None else tolerance
        return await self.set_and_confirm(
            address=address,
            value=value,
            predicate=lambda: is_within_tolerance(current=current(), target=value, tolerance=allowed),
            timeout=timeout,
            description=description,
        )

    async def wait_for(self, *, predicate: Predicate, timeout: float | None = None, description: str) -> bool:
        """
        Poll predicate until it holds or the timeout elapses.

        Returns True on success and False on timeout.
        """
        wait_timeout = self._default_timeout if timeout is None else timeout
        if predicate():
            _LOGGER.debug("WAIT_FOR: %s: %s already satisfied", self._name, description)
            return True

        start = time.monotonic()
        try:
            async with asyncio.timeout(wait_timeout):
                while not predicate():
                    await asyncio.sleep(self._poll_interval)
        except TimeoutError:
            _LOGGER.warning(
                "WAIT_FOR: %s: Timeout after %ss waiting for %s",
                self._name,
                wait_timeout,
                description,
            )
            return False

        _LOGGER.debug(
            "WAIT_FOR: %s: %s satisfied after %.3fs",
            self._name,
            description,
            time.monotonic() - start,
        )
        return True
