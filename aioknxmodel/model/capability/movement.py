# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Movement controllable capability (shutters, blinds).

Open and close send a one-shot direction bit to the movement control address
instead of writing 0 % or 100 % to the position address. Actuators derive
their position from motor runtime, and endpoint commands through the
position object can desynchronize that timing.

Successive open/close commands on one device are separated by a cooldown
measured from the device's last update. A command arriving early waits for
the remainder before anything is written.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
import time
from typing import TYPE_CHECKING, Any, Final

from aioknxmodel.bus.value import as_bool
from aioknxmodel.const import DEFAULT_MOVEMENT_COOLDOWN, MOVEMENT_DOWN, MOVEMENT_UP, STOP_PULSE
from aioknxmodel.model.capability.base import ChangeHandler, CommandGate, GatedCapability

if TYPE_CHECKING:
    from aioknxmodel.bus.address import ControlFeedbackPair
    from aioknxmodel.model.capability.activity import ActivityCapability
    from aioknxmodel.model.engine import ConfirmationEngine

__all__ = ["MovementCapability"]

_LOGGER: Final = logging.getLogger(__name__)


class MovementCapability(GatedCapability):
    """Open/close/stop with echo feedback and a cooldown between movements."""

    __slots__ = (
        "_activity",
        "_addresses",
        "_cooldown",
        "_direction",
        "_echo_count",
        "_last_updated_tick",
        "_stop_address",
        "_touch",
    )

    def __init__(
        self,
        *,
        engine: ConfirmationEngine,
        device_name: str,
        addresses: ControlFeedbackPair,
        stop_address: str,
        last_updated_tick: Callable[[], float | None],
        touch: Callable[[], None],
        activity: ActivityCapability | None = None,
        cooldown: float = DEFAULT_MOVEMENT_COOLDOWN,
        name: str = "movement",
        on_change: ChangeHandler | None = None,
        gate: CommandGate | None = None,
    ) -> None:
        """Initialize the capability."""
        super().__init__(engine=engine, device_name=device_name, name=name, on_change=on_change, gate=gate)
        self._addresses: Final = addresses
        self._stop_address: Final = stop_address
        self._last_updated_tick: Final = last_updated_tick
        self._touch: Final = touch
        self._activity: Final = activity
        self._cooldown: Final = cooldown
        self._direction: bool | None = None
        self._echo_count: int = 0

    @property
    def addresses(self) -> ControlFeedbackPair:
        """Return the movement control and echo address."""
        return self._addresses

    @property
    def cooldown(self) -> float:
        """Return the minimum time between two movement commands."""
        return self._cooldown

    @property
    def feedback_addresses(self) -> tuple[str, ...]:
        """Return the movement echo address."""
        return (self._addresses.feedback,)

    @property
    def is_moving_down(self) -> bool | None:
        """Return the direction of the last echoed movement command, None until known."""
        if self._direction is None:
            return None
        return self._direction == MOVEMENT_DOWN

    @property
    def remaining_cooldown(self) -> float:
        """Return the seconds left before the next movement command may be written."""
        if (last_tick := self._last_updated_tick()) is None:
            return 0.0
        elapsed = time.monotonic() - last_tick
        if 0 <= elapsed < self._cooldown:
            return self._cooldown - elapsed
        return 0.0

    @property
    def stop_address(self) -> str:
        """Return the stop control address."""
        return self._stop_address

    async def close(self, *, timeout: float | None = None) -> bool:
        """Start moving down and wait for the echo."""
        return await self._move(direction=MOVEMENT_DOWN, timeout=timeout)

    async def open(self, *, timeout: float | None = None) -> bool:
        """Start moving up and wait for the echo."""
        return await self._move(direction=MOVEMENT_UP, timeout=timeout)

    async def read_state(self) -> None:
        """Read the movement echo address."""
        await self._read_address(address=self._addresses.feedback, value_type=bool)

    async def stop(self, *, timeout: float | None = None) -> bool:
        """
        Send the stop pulse.

        If an activity status is attached, wait until it reports idle.
        """
        await self._pass_gate()
        await self._write(address=self._stop_address, value=STOP_PULSE)
        return await self._engine.wait_for(
            predicate=lambda: self._activity is None or self._activity.is_active is False,
            timeout=timeout,
            description=f"{self} stopped",
        )

    async def wait_for_cooldown(self, *, timeout: float | None = None) -> bool:
        """
        Wait once for the cooldown left since the last update.

        Telegrams arriving during the wait do not extend it. Returns False,
        after waiting timeout seconds, if the cooldown left exceeds timeout.
        """
        if (remaining := self.remaining_cooldown) <= 0:
            return True
        wait_timeout = self._engine.default_timeout if timeout is None else timeout
        _LOGGER.debug("MOVEMENT: %s: Waiting %.3fs for cooldown", self, remaining)
        try:
            async with asyncio.timeout(wait_timeout):
                await asyncio.sleep(remaining)
        except TimeoutError:
            _LOGGER.warning(
                "MOVEMENT: %s: Cooldown of %.3fs not over within %ss, nothing written",
                self,
                remaining,
                wait_timeout,
            )
            return False
        return True

    async def _move(self, *, direction: bool, timeout: float | None) -> bool:
        """Write a direction bit after the cooldown. The cooldown wait counts against timeout."""
        wait_timeout = self._engine.default_timeout if timeout is None else timeout
        start = time.monotonic()
        if not await self.wait_for_cooldown(timeout=wait_timeout):
            return False
        await self._pass_gate()
        echo_count = self._echo_count
        await self._write(address=self._addresses.control, value=direction)
        return await self._engine.wait_for(
            predicate=lambda: self._echo_count > echo_count and self._direction == direction,
            timeout=max(0.0, wait_timeout - (time.monotonic() - start)),
            description=f"{self} {'down' if direction == MOVEMENT_DOWN else 'up'} echo",
        )

    async def _write(self, *, address: str, value: bool) -> None:
        """Write a movement bit and mark the device as updated."""
        _LOGGER.debug("MOVEMENT: %s: Writing %s to %s", self, value, address)
        await self._engine.gateway.write_value(address=address, value=value)
        self._touch()

    def _process_feedback(self, *, address: str, value: Any) -> None:
        old_direction = self._direction
        self._direction = as_bool(value)
        self._echo_count += 1
        self._changed(old_value=old_direction, new_value=self._direction)
