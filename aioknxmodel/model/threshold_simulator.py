# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Threshold simulator.

Publishes the shared brightness and outdoor temperature threshold flags in
place of the weather station, so sun protection behaviour of shutters can be
exercised on demand. During a testing isolation the real brightness
threshold monitoring device is blocked so it does not overwrite the
simulated flags.

Public API
----------
- ThresholdSimulatorDevice: Threshold publisher with weather scenarios
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Final

from aioknxmodel.config import DEFAULT_MODEL_CONFIG, ModelConfig
from aioknxmodel.const import DEFAULT_SCENARIO_TELEGRAM_DELAY, DeviceType
from aioknxmodel.decorators import inspector
from aioknxmodel.model.addresses import ThresholdSimulatorAddresses
from aioknxmodel.model.capability import BlockCapability, ThresholdWriterCapability
from aioknxmodel.model.device import BaseDevice

if TYPE_CHECKING:
    from aioknxmodel.event_bus import EventBus
    from aioknxmodel.interfaces import BusGatewayProtocol

__all__ = ["ThresholdSimulatorDevice"]

_LOGGER: Final = logging.getLogger(__name__)


class ThresholdSimulatorDevice(BaseDevice):
    """Publisher of simulated threshold flags."""

    __slots__ = ("_addresses", "_monitoring_block", "_telegram_delay", "_thresholds")

    device_type = DeviceType.THRESHOLD_SIMULATOR

    def __init__(
        self,
        *,
        device_id: str,
        name: str,
        gateway: BusGatewayProtocol,
        addresses: ThresholdSimulatorAddresses | None = None,
        telegram_delay: float = DEFAULT_SCENARIO_TELEGRAM_DELAY,
        config: ModelConfig = DEFAULT_MODEL_CONFIG,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize the simulator."""
        super().__init__(device_id=device_id, name=name, gateway=gateway, config=config, event_bus=event_bus)
        self._addresses: Final = addresses or ThresholdSimulatorAddresses()
        self._telegram_delay: Final = telegram_delay
        self._thresholds: Final = self._add_capability(
            ThresholdWriterCapability(
                engine=self._engine,
                device_name=device_id,
                addresses=self._addresses.thresholds,
                on_change=self._on_capability_changed,
            )
        )
        self._monitoring_block: Final = self._add_capability(
            BlockCapability(
                engine=self._engine,
                device_name=device_id,
                name="threshold_monitoring",
                addresses=self._addresses.monitoring_block,
                on_change=self._on_capability_changed,
            )
        )

    @property
    def addresses(self) -> ThresholdSimulatorAddresses:
        """Return the address set."""
        return self._addresses

    @property
    def brightness_threshold1(self) -> bool | None:
        """Return True if the first brightness threshold is exceeded, None until known."""
        """Return the published first brightness threshold."""
        return self._thresholds.brightness_threshold1

    @property
    def brightness_threshold2(self) -> bool | None:
        """Return True if the second brightness threshold is exceeded, None until known."""
        """Return the published second brightness threshold."""
        return self._thresholds.brightness_threshold2

    @property
    def is_threshold_monitoring_blocked(self) -> bool | None:
        """Return True if the real threshold monitoring device is blocked."""
        return self._monitoring_block.is_blocked

    @property
    def outdoor_temperature_threshold(self) -> bool | None:
        """Return True if the outdoor temperature threshold is exceeded, None until known."""
        """Return the published outdoor temperature threshold."""
        return self._thresholds.outdoor_temperature_threshold

    @property
    def telegram_delay(self) -> float:
        """Return the pause between the telegrams of a scenario."""
        return self._telegram_delay

    @inspector
    async def block_threshold_monitoring(self, *, timeout: float | None = None) -> bool:
        """Block the real brightness threshold monitoring device."""
        return await self.set_threshold_monitoring_blocked(blocked=True, timeout=timeout)

    @inspector
    async def enter_testing_isolation(
        self,
        *,
        brightness1: bool = False,
        brightness2: bool = False,
        temperature: bool = False,
        timeout: float | None = None,
    ) -> bool:
        """
        Block the real monitoring device, then publish the given flags.

        Afterwards only the simulator decides the threshold conditions.
        """
        _LOGGER.info("SIMULATOR: %s: Entering testing isolation", self)
        blocked = await self.block_threshold_monitoring(timeout=timeout)
        await asyncio.sleep(2 * self._telegram_delay)
        published = await self.simulate_custom_threshold_states(
            brightness1=brightness1, brightness2=brightness2, temperature=temperature, timeout=timeout
        )
        return blocked and published

    @inspector
    async def exit_testing_isolation(self, *, timeout: float | None = None) -> bool:
        """Clear the simulated flags, then unblock the real monitoring device."""
        _LOGGER.info("SIMULATOR: %s: Exiting testing isolation", self)
        cleared = await self.simulate_normal_conditions(timeout=timeout)
        await asyncio.sleep(2 * self._telegram_delay)
        unblocked = await self.unblock_threshold_monitoring(timeout=timeout)
        return cleared and unblocked

    @inspector
    async def set_brightness_threshold1(self, *, exceeded: bool, timeout: float | None = None) -> bool:
        """Publish the first brightness threshold."""
        self._ensure_operational()
        return await self._thresholds.set_brightness_threshold1(exceeded=exceeded, timeout=timeout)

    @inspector
    async def set_brightness_threshold2(self, *, exceeded: bool, timeout: float | None = None) -> bool:
        """Publish the second brightness threshold."""
        self._ensure_operational()
        return await self._thresholds.set_brightness_threshold2(exceeded=exceeded, timeout=timeout)

    @inspector
    async def set_outdoor_temperature_threshold(self, *, exceeded: bool, timeout: float | None = None) -> bool:
        """Publish the outdoor temperature threshold."""
        self._ensure_operational()
        return await self._thresholds.set_outdoor_temperature_threshold(exceeded=exceeded, timeout=timeout)

    @inspector
    async def set_threshold_monitoring_blocked(self, *, blocked: bool, timeout: float | None = None) -> bool:
        """Block or release the real brightness threshold monitoring device."""
        self._ensure_operational()
        _LOGGER.debug("SIMULATOR: %s: Threshold monitoring blocked -> %s", self, blocked)
        return await self._monitoring_block.set_blocked(blocked=blocked, timeout=timeout)

    @inspector
    async def simulate_custom_threshold_states(
        self, *, brightness1: bool, brightness2: bool, temperature: bool, timeout: float | None = None
    ) -> bool:
        """Publish an arbitrary combination of the three flags."""
        _LOGGER.debug(
            "SIMULATOR: %s: brightness1=%s brightness2=%s temperature=%s",
            self,
            brightness1,
            brightness2,
            temperature,
        )
        results = [await self.set_brightness_threshold1(exceeded=brightness1, timeout=timeout)]
        await asyncio.sleep(self._telegram_delay)
        results.append(await self.set_brightness_threshold2(exceeded=brightness2, timeout=timeout))
        await asyncio.sleep(self._telegram_delay)
        results.append(await self.set_outdoor_temperature_threshold(exceeded=temperature, timeout=timeout))
        return all(results)

    async def simulate_high_brightness(self, *, timeout: float | None = None) -> bool:
        """Both brightness thresholds exceeded."""
        return await self.simulate_custom_threshold_states(
            brightness1=True, brightness2=True, temperature=False, timeout=timeout
        )

    async def simulate_maximum_sun_protection(self, *, timeout: float | None = None) -> bool:
        """All thresholds exceeded."""
        return await self.simulate_custom_threshold_states(
            brightness1=True, brightness2=True, temperature=True, timeout=timeout
        )

    async def simulate_moderate_brightness(self, *, timeout: float | None = None) -> bool:
        """Only the first brightness threshold exceeded."""
        return await self.simulate_custom_threshold_states(
            brightness1=True, brightness2=False, temperature=False, timeout=timeout
        )

    async def simulate_normal_conditions(self, *, timeout: float | None = None) -> bool:
        """No threshold exceeded."""
        return await self.simulate_custom_threshold_states(
            brightness1=False, brightness2=False, temperature=False, timeout=timeout
        )

    @inspector
    async def unblock_threshold_monitoring(self, *, timeout: float | None = None) -> bool:
        """Release the real brightness threshold monitoring device."""
        return await self.set_threshold_monitoring_blocked(blocked=False, timeout=timeout)

    async def wait_for_brightness_threshold1_state(self, *, target_state: bool, timeout: float | None = None) -> bool:
        """Wait until the first brightness threshold reports target_state."""
        return await self._thresholds.wait_for_brightness_threshold1_state(target_state=target_state, timeout=timeout)

    async def wait_for_brightness_threshold2_state(self, *, target_state: bool, timeout: float | None = None) -> bool:
        """Wait until the second brightness threshold reports target_state."""
        return await self._thresholds.wait_for_brightness_threshold2_state(target_state=target_state, timeout=timeout)

    async def wait_for_outdoor_temperature_threshold_state(
        self, *, target_state: bool, timeout: float | None = None
    ) -> bool:
        """Wait until the outdoor temperature threshold reports target_state."""
        return await self._thresholds.wait_for_outdoor_temperature_threshold_state(
            target_state=target_state, timeout=timeout
        )

    async def wait_for_threshold_monitoring_block_state(
        self, *, target_state: bool, timeout: float | None = None
    ) -> bool:
        """Wait until the monitoring block equals target_state."""
        return await self._monitoring_block.wait_for_block_state(target_state=target_state, timeout=timeout)
