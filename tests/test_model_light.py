# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Tests for switchable lights."""

from __future__ import annotations

import pytest

from aioknxmodel.const import LockState, SwitchState
from aioknxmodel.event_bus import CapabilityUpdatedEvent, EventBus
from aioknxmodel.exceptions import InvalidOperationException, KnxValidationException
from aioknxmodel.model import LightDevice
from aioknxmodel_test_support import InMemoryGateway


class TestLightDevice:
    """Tests for LightDevice."""

    @pytest.mark.asyncio
    async def test_capability_events(self, light: LightDevice, gateway: InMemoryGateway, event_bus: EventBus) -> None:
        """Feedback changes are published, repeated values are not."""
        events: list[CapabilityUpdatedEvent] = []
        event_bus.subscribe(event_type=CapabilityUpdatedEvent, event_key="L1", handler=events.append)

        gateway.emit_feedback(address="1/1/105", value=True)
        gateway.emit_feedback(address="1/1/105", value=True)

        assert len(events) == 1
        assert events[0].capability == "switch"
        assert events[0].old_value == SwitchState.UNKNOWN
        assert events[0].new_value == SwitchState.ON
        assert light.last_updated is not None

    @pytest.mark.asyncio
    async def test_feedback_from_other_source(self, light: LightDevice, gateway: InMemoryGateway) -> None:
        """A wall switch changes the state without any command."""
        gateway.emit_feedback(address="1/1/105", value=b"\x01", source="1.1.20")
        assert light.is_on is True
        gateway.emit_feedback(address="1/1/105", value=0)
        assert light.switch_state == SwitchState.OFF

    @pytest.mark.asyncio
    async def test_invalid_feedback_is_dropped(self, light: LightDevice, gateway: InMemoryGateway) -> None:
        """An unconvertible payload leaves the state untouched."""
        gateway.emit_feedback(address="1/1/105", value=True)
        gateway.emit_feedback(address="1/1/105", value="not a bool")
        assert light.is_on is True

    @pytest.mark.asyncio
    async def test_lock_and_unlock(self, light: LightDevice, gateway: InMemoryGateway) -> None:
        """The lock is written and confirmed on its self reporting address."""
        assert await light.lock() is True
        assert light.lock_state == LockState.ON
        assert await light.unlock() is True
        assert light.is_locked is False
        assert gateway.writes_to(address="1/2/5") == [True, False]

    @pytest.mark.asyncio
    async def test_restore_lock_last(self, light: LightDevice, gateway: InMemoryGateway) -> None:
        """Restore reissues the other capabilities first and the lock last."""
        gateway.emit_feedback(address="1/2/5", value=True)
        gateway.emit_feedback(address="1/1/105", value=False)
        light.save_current_state()
        await light.unlock()
        await light.turn_on()
        gateway.clear_writes()

        assert await light.restore_saved_state() is True

        assert [(record.address, record.value) for record in gateway.writes] == [("1/1/5", False), ("1/2/5", True)]
        assert light.switch_state == SwitchState.OFF
        assert light.lock_state == LockState.ON

    @pytest.mark.asyncio
    async def test_restore_unlocks_before_changes(self, light: LightDevice, gateway: InMemoryGateway) -> None:
        """A device locked after the snapshot is unlocked to restore and locked again if it was."""
        gateway.emit_feedback(address="1/1/105", value=True)
        gateway.emit_feedback(address="1/2/5", value=False)
        light.save_current_state()
        await light.turn_off()
        await light.lock()
        gateway.clear_writes()

        assert await light.restore_saved_state() is True

        assert [(record.address, record.value) for record in gateway.writes] == [("1/2/5", False), ("1/1/5", True)]
        assert light.is_on is True
        assert light.is_locked is False

    @pytest.mark.asyncio
    async def test_restore_without_snapshot_raises(self, light: LightDevice) -> None:
        """Restore needs a previous save."""
        assert light.has_saved_state is False
        with pytest.raises(InvalidOperationException):
            await light.restore_saved_state()

    @pytest.mark.asyncio
    async def test_save_then_restore_writes_nothing(self, light: LightDevice, gateway: InMemoryGateway) -> None:
        """Restoring an unchanged device issues no command."""
        gateway.emit_feedback(address="1/1/105", value=True)
        gateway.emit_feedback(address="1/2/5", value=False)
        light.save_current_state()

        assert await light.restore_saved_state() is True

        assert gateway.write_count == 0
        assert light.saved_switch_state == SwitchState.ON
        assert light.saved_lock_state == LockState.OFF

    @pytest.mark.asyncio
    async def test_set_unknown_state_raises(self, light: LightDevice, gateway: InMemoryGateway) -> None:
        """Unknown is not a valid command target."""
        with pytest.raises(KnxValidationException):
            await light.set_switch_state(state=SwitchState.UNKNOWN)
        assert gateway.write_count == 0

    @pytest.mark.asyncio
    async def test_timeout_returns_false(self, gateway: InMemoryGateway, light: LightDevice) -> None:
        """Without feedback the command reports False after the timeout."""
        device = LightDevice(device_id="L2", name="Cellar", sub_group="6", gateway=gateway, config=light.config)
        await device.initialize()

        assert await device.turn_on(timeout=0.05) is False
        assert gateway.writes_to(address="1/1/6") == [True]
        assert device.switch_state == SwitchState.UNKNOWN
        device.dispose()

    @pytest.mark.asyncio
    async def test_toggle(self, light: LightDevice, gateway: InMemoryGateway) -> None:
        """Toggle turns an unknown or off light on and an on light off."""
        assert await light.toggle() is True
        assert light.is_on is True
        assert await light.toggle() is True
        assert light.is_on is False
        assert gateway.writes_to(address="1/1/5") == [True, False]

    @pytest.mark.asyncio
    async def test_turn_on_and_off(self, light: LightDevice, gateway: InMemoryGateway) -> None:
        """Commands are written to the control address and confirmed by the feedback address."""
        assert await light.turn_on() is True
        assert light.is_on is True
        assert await light.wait_for_switch_state(state=SwitchState.ON, timeout=0.01) is True
        assert await light.turn_off() is True
        assert light.switch_state == SwitchState.OFF
        assert gateway.writes_to(address="1/1/5") == [True, False]

    @pytest.mark.asyncio
    async def test_unlock_before_command(self, light: LightDevice, gateway: InMemoryGateway) -> None:
        """A locked light is unlocked before the switch command is written."""
        gateway.emit_feedback(address="1/2/5", value=True)
        assert light.is_locked is True

        assert await light.turn_on() is True

        assert [(record.address, record.value) for record in gateway.writes] == [("1/2/5", False), ("1/1/5", True)]
        assert light.is_locked is False
        assert light.is_on is True

    def test_unique_id(self, gateway: InMemoryGateway) -> None:
        """The unique id is a slug of type and device id."""
        device = LightDevice(device_id="Living Room 1", name="Living room", sub_group="1", gateway=gateway)
        assert device.unique_id == "knx_light_living_room_1"
        assert str(device) == "light:Living Room 1 (Living room)"
