# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Dimmable light with switch, brightness and lock."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from aioknxmodel.config import DEFAULT_MODEL_CONFIG, ModelConfig
from aioknxmodel.const import DeviceType, SwitchState
from aioknxmodel.decorators import inspector
from aioknxmodel.model.addresses import DimmerAddresses
from aioknxmodel.model.capability import PercentageCapability, SwitchCapability
from aioknxmodel.model.device import LockableDevice

if TYPE_CHECKING:
    from aioknxmodel.event_bus import EventBus
    from aioknxmodel.interfaces import BusGatewayProtocol

__all__ = ["DimmerDevice"]


class DimmerDevice(LockableDevice):
    """
    Dimmable light.

    Switch and brightness are separate group objects on the actuator. Setting
    the brightness does not change the reported switch state by itself; the
    actuator reports both independently.
    """

    __slots__ = ("_addresses", "_brightness", "_switch")

    device_type = DeviceType.DIMMER

    def __init__(
        self,
        *,
        device_id: str,
        name: str,
        sub_group: str,
        gateway: BusGatewayProtocol,
        addresses: DimmerAddresses | None = None,
        config: ModelConfig = DEFAULT_MODEL_CONFIG,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize the dimmer."""
        self._addresses: Final = addresses or DimmerAddresses.for_sub_group(sub_group=sub_group)
        super().__init__(
            device_id=device_id,
            name=name,
            gateway=gateway,
            lock_addresses=self._addresses.lock,
            sub_group=sub_group,
            config=config,
            event_bus=event_bus,
        )
        self._switch: Final = self._add_capability(
            SwitchCapability(
                engine=self._engine,
                device_name=device_id,
                name="switch",
                addresses=self._addresses.switch,
                on_change=self._on_capability_changed,
                gate=self._gate,
            )
        )
        self._brightness: Final = self._add_capability(
            PercentageCapability(
                engine=self._engine,
                device_name=device_id,
                name="brightness",
                addresses=self._addresses.brightness,
                on_change=self._on_capability_changed,
                gate=self._gate,
            )
        )

    @property
    def addresses(self) -> DimmerAddresses:
        """Return the address set."""
        return self._addresses

    @property
    def brightness(self) -> float | None:
        """Return the reported brightness in percent, None until known."""
        return self._brightness.percentage

    @property
    def is_on(self) -> bool:
        """Return True if the dimmer is on."""
        return self._switch.is_on

    @property
    def saved_brightness(self) -> float | None:
        """Return the saved brightness."""
        return self._brightness.saved_percentage

    @property
    def saved_switch_state(self) -> SwitchState | None:
        """Return the saved switch state."""
        return self._switch.saved_state

    @property
    def switch_state(self) -> SwitchState:
        """Return the switch state."""
        return self._switch.state

    @inspector
    async def adjust_brightness(self, *, delta: float, timeout: float | None = None) -> bool:
        """Change the brightness by delta percent, clamped to [0, 100]."""
        return await self._brightness.adjust(delta=delta, timeout=timeout)

    @inspector
    async def set_brightness(self, *, brightness: float, timeout: float | None = None) -> bool:
        """Set the brightness in percent and wait until it is reported within tolerance."""
        return await self._brightness.set_percentage(value=brightness, timeout=timeout)

    @inspector
    async def set_switch_state(self, *, state: SwitchState, timeout: float | None = None) -> bool:
        """Switch to state."""
        return await self._switch.set_state(state=state, timeout=timeout)

    @inspector
    async def toggle(self, *, timeout: float | None = None) -> bool:
        """Toggle the dimmer. An unknown state toggles to on."""
        return await self._switch.toggle(timeout=timeout)

    @inspector
    async def turn_off(self, *, timeout: float | None = None) -> bool:
        """Switch the dimmer off."""
        return await self._switch.turn_off(timeout=timeout)

    @inspector
    async def turn_on(self, *, timeout: float | None = None) -> bool:
        """Switch the dimmer on."""
        return await self._switch.turn_on(timeout=timeout)

    async def wait_for_brightness(
        self, *, target: float, tolerance: float | None = None, timeout: float | None = None
    ) -> bool:
        """Wait until the reported brightness is within tolerance of target."""
        return await self._brightness.wait_for_percentage(target=target, tolerance=tolerance, timeout=timeout)

    async def wait_for_switch_state(self, *, state: SwitchState, timeout: float | None = None) -> bool:
        """Wait until the dimmer reports state."""
        return await self._switch.wait_for_state(state=state, timeout=timeout)
