# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Switchable light with lock."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from aioknxmodel.config import DEFAULT_MODEL_CONFIG, ModelConfig
from aioknxmodel.const import DeviceType, SwitchState
from aioknxmodel.decorators import inspector
from aioknxmodel.model.addresses import LightAddresses
from aioknxmodel.model.capability import SwitchCapability
from aioknxmodel.model.device import LockableDevice

if TYPE_CHECKING:
    from aioknxmodel.event_bus import EventBus
    from aioknxmodel.interfaces import BusGatewayProtocol

__all__ = ["LightDevice"]


class LightDevice(LockableDevice):
    """Light that can be switched and locked."""

    __slots__ = ("_addresses", "_switch")

    device_type = DeviceType.LIGHT

    def __init__(
        self,
        *,
        device_id: str,
        name: str,
        sub_group: str,
        gateway: BusGatewayProtocol,
        addresses: LightAddresses | None = None,
        config: ModelConfig = DEFAULT_MODEL_CONFIG,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize the light."""
        self._addresses: Final = addresses or LightAddresses.for_sub_group(sub_group=sub_group)
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

    @property
    def addresses(self) -> LightAddresses:
        """Return the address set."""
        return self._addresses

    @property
    def is_on(self) -> bool:
        """Return True if the light is on."""
        return self._switch.is_on

    @property
    def saved_switch_state(self) -> SwitchState | None:
        """Return the saved switch state."""
        return self._switch.saved_state

    @property
    def switch_state(self) -> SwitchState:
        """Return the switch state."""
        return self._switch.state

    @inspector
    async def set_switch_state(self, *, state: SwitchState, timeout: float | None = None) -> bool:
        """Switch to state."""
        return await self._switch.set_state(state=state, timeout=timeout)

    @inspector
    async def toggle(self, *, timeout: float | None = None) -> bool:
        """Toggle the light. An unknown state toggles to on."""
        return await self._switch.toggle(timeout=timeout)

    @inspector
    async def turn_off(self, *, timeout: float | None = None) -> bool:
        """Switch the light off."""
        return await self._switch.turn_off(timeout=timeout)

    @inspector
    async def turn_on(self, *, timeout: float | None = None) -> bool:
        """Switch the light on."""
        return await self._switch.turn_on(timeout=timeout)

    async def wait_for_switch_state(self, *, state: SwitchState, timeout: float | None = None) -> bool:
        """Wait until the light reports state."""
        return await self._switch.wait_for_state(state=state, timeout=timeout)
