# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Threshold capability.

Weather stations publish binary threshold flags on shared addresses: two
brightness thresholds and one outdoor temperature threshold. Every device
that reacts to them keeps its own read only copy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from aioknxmodel.bus.value import as_bool
from aioknxmodel.const import (
    BRIGHTNESS_THRESHOLD1_ADDRESS,
    BRIGHTNESS_THRESHOLD2_ADDRESS,
    OUTDOOR_TEMPERATURE_THRESHOLD_ADDRESS,
)
from aioknxmodel.model.capability.base import BaseCapability, ChangeHandler

if TYPE_CHECKING:
    from aioknxmodel.model.engine import ConfirmationEngine

__all__ = ["ThresholdAddresses", "ThresholdCapability", "ThresholdWriterCapability"]


@dataclass(frozen=True, slots=True)
class ThresholdAddresses:
    """Addresses of the three threshold flags."""

    brightness_threshold1: str = BRIGHTNESS_THRESHOLD1_ADDRESS
    brightness_threshold2: str = BRIGHTNESS_THRESHOLD2_ADDRESS
    outdoor_temperature_threshold: str = OUTDOOR_TEMPERATURE_THRESHOLD_ADDRESS


class ThresholdCapability(BaseCapability):
    """Three independently reported threshold flags."""

    __slots__ = ("_addresses", "_fields", "_values")

    def __init__(
        self,
        *,
        engine: ConfirmationEngine,
        device_name: str,
        addresses: ThresholdAddresses | None = None,
        name: str = "threshold",
        on_change: ChangeHandler | None = None,
    ) -> None:
        """Initialize the capability."""
        super().__init__(engine=engine, device_name=device_name, name=name, on_change=on_change)
        self._addresses: Final = addresses or ThresholdAddresses()
        self._fields: Final[dict[str, str]] = {
            self._addresses.brightness_threshold1: "brightness_threshold1",
            self._addresses.brightness_threshold2: "brightness_threshold2",
            self._addresses.outdoor_temperature_threshold: "outdoor_temperature_threshold",
        }
        self._values: dict[str, bool | None] = dict.fromkeys(self._fields.values())

    @property
    def addresses(self) -> ThresholdAddresses:
        """Return the threshold addresses."""
        return self._addresses

    @property
    def brightness_threshold1(self) -> bool | None:
        """Return the first brightness threshold, None until known."""
        return self._values["brightness_threshold1"]

    @property
    def brightness_threshold2(self) -> bool | None:
        """Return the second brightness threshold, None until known."""
        return self._values["brightness_threshold2"]

    @property
    def feedback_addresses(self) -> tuple[str, ...]:
        """Return the three threshold addresses."""
        return tuple(self._fields)

    @property
    def outdoor_temperature_threshold(self) -> bool | None:
        """Return the outdoor temperature threshold, None until known."""
        return self._values["outdoor_temperature_threshold"]

    async def read_state(self) -> None:
        """Read all threshold addresses."""
        for address in self._fields:
            await self._read_address(address=address, value_type=bool)

    async def wait_for_brightness_threshold1_state(self, *, target_state: bool, timeout: float | None = None) -> bool:
        """Wait until the first brightness threshold equals target_state."""
        return await self._wait_for_field(field="brightness_threshold1", target_state=target_state, timeout=timeout)

    async def wait_for_brightness_threshold2_state(self, *, target_state: bool, timeout: float | None = None) -> bool:
        """Wait until the second brightness threshold equals target_state."""
        return await self._wait_for_field(field="brightness_threshold2", target_state=target_state, timeout=timeout)

    async def wait_for_outdoor_temperature_threshold_state(
        self, *, target_state: bool, timeout: float | None = None
    ) -> bool:
        """Wait until the outdoor temperature threshold equals target_state."""
        return await self._wait_for_field(
            field="outdoor_temperature_threshold", target_state=target_state, timeout=timeout
        )

    def _process_feedback(self, *, address: str, value: Any) -> None:
        field = self._fields[address]
        old_value = self._values[field]
        self._values[field] = as_bool(value)
        self._changed(old_value=old_value, new_value=self._values[field], field=field)

    async def _wait_for_field(self, *, field: str, target_state: bool, timeout: float | None) -> bool:
        return await self._engine.wait_for(
            predicate=lambda: self._values[field] is target_state,
            timeout=timeout,
            description=f"{self}.{field} == {target_state}",
        )


class ThresholdWriterCapability(ThresholdCapability):
    """
    Threshold flags owned by a simulating publisher.

    The publisher writes the flags on the shared addresses and confirms them
    from the telegrams on the same addresses. Only the owner takes part in
    save and restore.
    """

    __slots__ = ("_saved",)

    def __init__(
        self,
        *,
        engine: ConfirmationEngine,
        device_name: str,
        addresses: ThresholdAddresses | None = None,
        name: str = "threshold",
        on_change: ChangeHandler | None = None,
    ) -> None:
        """Initialize the capability."""
        super().__init__(
            engine=engine, device_name=device_name, addresses=addresses, name=name, on_change=on_change
        )
        self._saved: dict[str, bool | None] | None = None

    @property
    def has_saved_state(self) -> bool:
        """Return True if a snapshot has been taken."""
        return self._saved is not None

    @property
    def needs_restore(self) -> bool:
        """Return True if a known saved flag differs from the current one."""
        return bool(self._fields_to_restore())

    @property
    def saved_values(self) -> dict[str, bool | None] | None:
        """Return a copy of the snapshot."""
        return None if self._saved is None else dict(self._saved)

    async def restore(self, *, timeout: float | None = None) -> bool:
        """Reissue every saved flag that differs from the current one."""
        results = [
            await self._set_field(field=field, value=value, timeout=timeout)
            for field, value in self._fields_to_restore().items()
        ]
        return all(results)

    def save(self) -> None:
        """Copy the current flags into the snapshot."""
        self._saved = dict(self._values)

    async def set_brightness_threshold1(self, *, exceeded: bool, timeout: float | None = None) -> bool:
        """Publish the first brightness threshold."""
        return await self._set_field(field="brightness_threshold1", value=exceeded, timeout=timeout)

    async def set_brightness_threshold2(self, *, exceeded: bool, timeout: float | None = None) -> bool:
        """Publish the second brightness threshold."""
        return await self._set_field(field="brightness_threshold2", value=exceeded, timeout=timeout)

    async def set_outdoor_temperature_threshold(self, *, exceeded: bool, timeout: float | None = None) -> bool:
        """Publish the outdoor temperature threshold."""
        return await self._set_field(field="outdoor_temperature_threshold", value=exceeded, timeout=timeout)

    def _fields_to_restore(self) -> dict[str, bool]:
        if self._saved is None:
            return {}
        return {
            field: value
            for field, value in self._saved.items()
            if value is not None and value is not self._values[field]
        }

    async def _set_field(self, *, field: str, value: bool, timeout: float | None) -> bool:
        address = getattr(self._addresses, field)
        return await self._engine.set_bit_and_confirm(
            address=address,
            value=value,
            current=lambda: self._values[field],
            timeout=timeout,
            description=f"{self}.{field} == {value}",
        )
