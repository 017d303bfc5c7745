# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Shutter with movement, position, lock, sun protection and thresholds.

Open and close use the movement object (one-shot direction bit) so the
actuator keeps its runtime based position in sync. set_position() writes the
position object for intermediate positions. The sun protection automatic of
the actuator can be blocked; its status and the shared brightness and
outdoor temperature thresholds are reported read only.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from aioknxmodel.config import DEFAULT_MODEL_CONFIG, ModelConfig
from aioknxmodel.const import DeviceType
from aioknxmodel.decorators import inspector
from aioknxmodel.model.addresses import ShutterAddresses
from aioknxmodel.model.capability import (
    ActivityCapability,
    BlockCapability,
    MovementCapability,
    PercentageCapability,
    ThresholdCapability,
)
from aioknxmodel.model.device import LockableDevice

if TYPE_CHECKING:
    from aioknxmodel.event_bus import EventBus
    from aioknxmodel.interfaces import BusGatewayProtocol

__all__ = ["ShutterDevice"]


class ShutterDevice(LockableDevice):
    """Shutter or blind actuator channel."""

    __slots__ = ("_activity", "_addresses", "_movement", "_position", "_sun_protection", "_thresholds")

    device_type = DeviceType.SHUTTER

    def __init__(
        self,
        *,
        device_id: str,
        name: str,
        sub_group: str,
        gateway: BusGatewayProtocol,
        addresses: ShutterAddresses | None = None,
        config: ModelConfig = DEFAULT_MODEL_CONFIG,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize the shutter."""
        self._addresses: Final = addresses or ShutterAddresses.for_sub_group(sub_group=sub_group)
        super().__init__(
            device_id=device_id,
            name=name,
            gateway=gateway,
            lock_addresses=self._addresses.lock,
            sub_group=sub_group,
            config=config,
            event_bus=event_bus,
        )
        self._position: Final = self._add_capability(
            PercentageCapability(
                engine=self._engine,
                device_name=device_id,
                name="position",
                addresses=self._addresses.position,
                on_change=self._on_capability_changed,
                gate=self._gate,
            )
        )
        self._activity: Final = self._add_capability(
            ActivityCapability(
                engine=self._engine,
                device_name=device_id,
                status_address=self._addresses.movement_status,
                on_change=self._on_capability_changed,
            )
        )
        self._movement: Final = self._add_capability(
            MovementCapability(
                engine=self._engine,
                device_name=device_id,
                addresses=self._addresses.movement,
                stop_address=self._addresses.stop.control,
                last_updated_tick=self._get_last_updated_tick,
                touch=self._touch,
                activity=self._activity,
                cooldown=config.movement_cooldown,
                on_change=self._on_capability_changed,
                gate=self._gate,
            )
        )
        self._sun_protection: Final = self._add_capability(
            BlockCapability(
                engine=self._engine,
                device_name=device_id,
                name="sun_protection",
                addresses=self._addresses.sun_protection,
                status_address=self._addresses.sun_protection_status,
                on_change=self._on_capability_changed,
            )
        )
        self._thresholds: Final = self._add_capability(
            ThresholdCapability(
                engine=self._engine,
                device_name=device_id,
                addresses=self._addresses.thresholds,
                on_change=self._on_capability_changed,
            )
        )

    @property
    def addresses(self) -> ShutterAddresses:
        """Return the address set."""
        return self._addresses

    @property
    def brightness_threshold1(self) -> bool | None:
        """Return True if the first brightness threshold is exceeded, None until known."""
        return self._thresholds.brightness_threshold1

    @property
    def brightness_threshold2(self) -> bool | None:
        """Return True if the second brightness threshold is exceeded, None until known."""
        return self._thresholds.brightness_threshold2

    @property
    def is_moving(self) -> bool | None:
        """Return True while the actuator reports movement, None until known."""
        return self._activity.is_active

    @property
    def is_moving_down(self) -> bool | None:
        """Return the direction of the last confirmed movement command."""
        return self._movement.is_moving_down

    @property
    def is_sun_protection_active(self) -> bool | None:
        """Return True while the sun protection automatic is driving the shutter."""
        return self._sun_protection.is_active

    @property
    def is_sun_protection_blocked(self) -> bool | None:
        """Return True if the sun protection automatic is blocked."""
        return self._sun_protection.is_blocked

    @property
    def outdoor_temperature_threshold(self) -> bool | None:
        """Return True if the outdoor temperature threshold is exceeded, None until known."""
        return self._thresholds.outdoor_temperature_threshold

    @property
    def position(self) -> float | None:
        """Return the reported position in percent (0 open, 100 closed), None until known."""
        return self._position.percentage

    @property
    def remaining_cooldown(self) -> float:
        """Return the seconds before the next open/close may be written."""
        return self._movement.remaining_cooldown

    @property
    def saved_position(self) -> float | None:
        """Return the saved position."""
        return self._position.saved_percentage

    @property
    def saved_sun_protection_blocked(self) -> bool | None:
        """Return the saved sun protection block state."""
        return self._sun_protection.saved_blocked

    @inspector
    async def adjust_position(self, *, delta: float, timeout: float | None = None) -> bool:
        """Move by delta percent, clamped to [0, 100]."""
        return await self._position.adjust(delta=delta, timeout=timeout)

    @inspector
    async def block_sun_protection(self, *, timeout: float | None = None) -> bool:
        """Block the sun protection automatic."""
        self._ensure_operational()
        return await self._sun_protection.block(timeout=timeout)

    @inspector
    async def close(self, *, timeout: float | None = None) -> bool:
        """Move down and wait for the movement echo."""
        return await self._movement.close(timeout=timeout)

    @inspector
    async def open(self, *, timeout: float | None = None) -> bool:
        """Move up and wait for the movement echo."""
        return await self._movement.open(timeout=timeout)

    @inspector
    async def set_position(self, *, position: float, timeout: float | None = None) -> bool:
        """Drive to position and wait until it is reported within tolerance."""
        return await self._position.set_percentage(value=position, timeout=timeout)

    @inspector
    async def set_sun_protection_blocked(self, *, blocked: bool, timeout: float | None = None) -> bool:
        """Block or release the sun protection automatic."""
        self._ensure_operational()
        return await self._sun_protection.set_blocked(blocked=blocked, timeout=timeout)

    @inspector
    async def stop(self, *, timeout: float | None = None) -> bool:
        """Send the stop pulse and wait until the actuator reports it is idle."""
        return await self._movement.stop(timeout=timeout)

    @inspector
    async def unblock_sun_protection(self, *, timeout: float | None = None) -> bool:
        """Release the sun protection automatic."""
        self._ensure_operational()
        return await self._sun_protection.unblock(timeout=timeout)

    async def wait_for_active(self, *, timeout: float | None = None) -> bool:
        """Wait until the actuator reports movement."""
        return await self._activity.wait_for_active(timeout=timeout)

    async def wait_for_brightness_threshold1_state(self, *, target_state: bool, timeout: float | None = None) -> bool:
        """Wait until the first brightness threshold reports target_state."""
        return await self._thresholds.wait_for_brightness_threshold1_state(target_state=target_state, timeout=timeout)

    async def wait_for_brightness_threshold2_state(self, *, target_state: bool, timeout: float | None = None) -> bool:
        """Wait until the second brightness threshold reports target_state."""
        return await self._thresholds.wait_for_brightness_threshold2_state(target_state=target_state, timeout=timeout)

    async def wait_for_inactive(self, *, timeout: float | None = None) -> bool:
        """Wait until the actuator reports it is idle."""
        return await self._activity.wait_for_inactive(timeout=timeout)

    async def wait_for_outdoor_temperature_threshold_state(
        self, *, target_state: bool, timeout: float | None = None
    ) -> bool:
        """Wait until the outdoor temperature threshold reports target_state."""
        return await self._thresholds.wait_for_outdoor_temperature_threshold_state(
            target_state=target_state, timeout=timeout
        )

    async def wait_for_position(
        self, *, target: float, tolerance: float | None = None, timeout: float | None = None
    ) -> bool:
        """Wait until the reported position is within tolerance of target."""
        return await self._position.wait_for_percentage(target=target, tolerance=tolerance, timeout=timeout)

    async def wait_for_sun_protection_active_state(self, *, target_state: bool, timeout: float | None = None) -> bool:
        """Wait until the sun protection status equals target_state."""
        return await self._sun_protection.wait_for_active_state(target_state=target_state, timeout=timeout)

    async def wait_for_sun_protection_block_state(self, *, target_state: bool, timeout: float | None = None) -> bool:
        """Wait until the sun protection block equals target_state."""
        return await self._sun_protection.wait_for_block_state(target_state=target_state, timeout=timeout)
