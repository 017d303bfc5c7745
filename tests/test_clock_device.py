# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Tests for the network clock."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta
import logging
from unittest.mock import MagicMock

import pytest

from aioknxmodel.config import ModelConfig
from aioknxmodel.const import ClockMode
from aioknxmodel.event_bus import ClockModeChangedEvent, EventBus
from aioknxmodel.exceptions import InvalidOperationException, KnxValidationException
from aioknxmodel.interfaces import SunPosition, SunPositionProviderProtocol
from aioknxmodel.model import ClockDevice
from aioknxmodel.model.clock import decode_date_time, encode_date_time
from aioknxmodel_test_support import InMemoryGateway

_SAMPLE = datetime(2025, 6, 15, 14, 30, 45)


@pytest.fixture
async def make_clock(
    gateway: InMemoryGateway, model_config: ModelConfig, event_bus: EventBus
) -> AsyncGenerator[object]:
    """Return a builder of initialized clocks that are disposed afterwards."""
    clocks: list[ClockDevice] = []

    async def _make(*, mode: ClockMode = ClockMode.SLAVE, interval: float = 30.0, **kwargs: object) -> ClockDevice:
        clock = ClockDevice(
            device_id=f"C{len(clocks) + 1}",
            name="Clock",
            gateway=gateway,
            mode=mode,
            interval=interval,
            config=model_config,
            event_bus=event_bus,
            **kwargs,  # type: ignore[arg-type]
        )
        clocks.append(clock)
        await clock.initialize()
        return clock

    yield _make
    for clock in clocks:
        clock.dispose()


def _mode_changes(event_bus: EventBus) -> list[ClockModeChangedEvent]:
    changes: list[ClockModeChangedEvent] = []
    event_bus.subscribe(event_type=ClockModeChangedEvent, event_key=None, handler=changes.append)
    return changes


class TestClockSlave:
    """Tests for the slave role."""

    @pytest.mark.asyncio
    async def test_malformed_telegram_is_dropped(
        self, make_clock, gateway: InMemoryGateway, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A payload that cannot be decoded is logged and ignored."""
        clock = await make_clock()

        with caplog.at_level(logging.WARNING):
            gateway.emit_feedback(address="0/0/1", value=b"\x7d\x06")
            gateway.emit_feedback(address="0/0/1", value=bytes([125, 6, 15, 24, 30, 45, 0, 0]))

        assert clock.has_valid_time is False
        assert clock.current_date_time is None
        assert "Dropping time telegram" in caplog.text

    @pytest.mark.asyncio
    async def test_receives_time(self, make_clock, gateway: InMemoryGateway) -> None:
        """A time telegram sets the current time and marks it valid."""
        clock = await make_clock()
        assert clock.mode == ClockMode.SLAVE
        assert clock.is_broadcasting is False
        assert clock.is_watchdog_armed is False

        gateway.emit_feedback(address="0/0/1", value=encode_date_time(date_time=_SAMPLE))

        assert clock.has_valid_time is True
        assert clock.current_date_time == _SAMPLE
        assert clock.last_time_received is not None
        assert gateway.write_count == 0

    @pytest.mark.asyncio
    async def test_send_time_without_valid_time(
        self, make_clock, gateway: InMemoryGateway, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Without a valid time nothing is written."""
        clock = await make_clock()

        with caplog.at_level(logging.WARNING):
            await clock.send_time()

        assert gateway.write_count == 0
        assert "no valid time available" in caplog.text

    @pytest.mark.asyncio
    async def test_send_given_time(self, make_clock, gateway: InMemoryGateway) -> None:
        """A given time becomes the current time and is written."""
        clock = await make_clock()

        await clock.send_time(date_time=_SAMPLE)

        assert clock.current_date_time == _SAMPLE
        assert gateway.writes_to(address="0/0/1") == [encode_date_time(date_time=_SAMPLE)]


class TestClockMaster:
    """Tests for the master role."""

    @pytest.mark.asyncio
    async def test_broadcasts_immediately_and_periodically(self, make_clock, gateway: InMemoryGateway) -> None:
        """The first telegram is sent right away, further ones every interval."""
        clock = await make_clock(mode=ClockMode.MASTER, interval=0.05)
        await asyncio.sleep(0.01)

        assert clock.is_broadcasting is True
        assert clock.has_valid_time is True
        assert len(gateway.writes_to(address="0/0/1")) == 1

        await asyncio.sleep(0.12)
        payloads = gateway.writes_to(address="0/0/1")
        assert len(payloads) >= 3
        assert all(len(payload) == 8 for payload in payloads)
        assert abs(decode_date_time(payload=payloads[-1]) - datetime.now()) < timedelta(seconds=2)

    @pytest.mark.asyncio
    async def test_derives_time_from_anchor(self, make_clock) -> None:
        """The master time advances from the anchor."""
        clock = await make_clock()
        await clock.send_time(date_time=_SAMPLE)
        await clock.switch_to_master_mode()
        await asyncio.sleep(0.05)

        current = clock.current_date_time
        assert current is not None
        assert _SAMPLE + timedelta(seconds=0.04) <= current < _SAMPLE + timedelta(seconds=1)

    @pytest.mark.asyncio
    async def test_switch_to_slave_stops_broadcast(self, make_clock, gateway: InMemoryGateway) -> None:
        """Leaving master mode cancels the broadcaster and keeps the time."""
        clock = await make_clock(mode=ClockMode.MASTER, interval=0.02)
        await asyncio.sleep(0.01)

        await clock.switch_to_slave_mode()
        count = len(gateway.writes_to(address="0/0/1"))
        await asyncio.sleep(0.05)

        assert clock.is_broadcasting is False
        assert len(gateway.writes_to(address="0/0/1")) == count
        assert clock.has_valid_time is True
        assert clock.current_date_time is not None

    @pytest.mark.asyncio
    async def test_write_failure_keeps_broadcasting(
        self, make_clock, gateway: InMemoryGateway, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A failed broadcast is logged and retried after the interval."""
        gateway.fail_writes = True
        with caplog.at_level(logging.WARNING):
            clock = await make_clock(mode=ClockMode.MASTER, interval=0.02)
            await asyncio.sleep(0.03)
        gateway.fail_writes = False
        await asyncio.sleep(0.05)

        assert "Broadcast failed" in caplog.text
        assert clock.is_broadcasting is True
        assert len(gateway.writes_to(address="0/0/1")) >= 1


class TestClockSlaveMaster:
    """Tests for the slave with failover role."""

    @pytest.mark.asyncio
    async def test_promotes_exactly_once(self, make_clock, event_bus: EventBus, gateway: InMemoryGateway) -> None:
        """Without time telegrams the clock becomes master after twice the interval."""
        changes = _mode_changes(event_bus)
        clock = await make_clock(mode=ClockMode.SLAVE_MASTER, interval=0.05)
        assert clock.is_watchdog_armed is True
        assert clock.watchdog_timeout == pytest.approx(0.1)

        await asyncio.sleep(0.2)
        assert clock.mode == ClockMode.MASTER
        assert clock.is_broadcasting is True
        assert clock.is_watchdog_armed is False

        await asyncio.sleep(0.15)
        assert [(change.old_mode, change.new_mode) for change in changes] == [
            (ClockMode.SLAVE_MASTER, ClockMode.MASTER)
        ]
        assert len(gateway.writes_to(address="0/0/1")) >= 2

    @pytest.mark.asyncio
    async def test_telegram_rearms_watchdog(self, make_clock, gateway: InMemoryGateway) -> None:
        """Every received telegram restarts the watchdog."""
        clock = await make_clock(mode=ClockMode.SLAVE_MASTER, interval=0.1)

        await asyncio.sleep(0.12)
        gateway.emit_feedback(address="0/0/1", value=encode_date_time(date_time=_SAMPLE))
        await asyncio.sleep(0.12)
        assert clock.mode == ClockMode.SLAVE_MASTER
        assert clock.current_date_time == _SAMPLE

        await asyncio.sleep(0.2)
        assert clock.mode == ClockMode.MASTER

    @pytest.mark.asyncio
    async def test_switch_to_slave_disarms(self, make_clock) -> None:
        """Switching to slave cancels the watchdog."""
        clock = await make_clock(mode=ClockMode.SLAVE_MASTER, interval=0.05)

        await clock.switch_to_slave_mode()
        await asyncio.sleep(0.15)

        assert clock.mode == ClockMode.SLAVE
        assert clock.is_watchdog_armed is False

    @pytest.mark.asyncio
    async def test_dispose_cancels_watchdog(self, make_clock) -> None:
        """A disposed clock never promotes itself."""
        clock = await make_clock(mode=ClockMode.SLAVE_MASTER, interval=0.05)

        clock.dispose()
        await asyncio.sleep(0.15)

        assert clock.mode == ClockMode.SLAVE_MASTER
        assert clock.is_broadcasting is False


class TestClockState:
    """Tests for snapshots, location and construction."""

    @pytest.mark.asyncio
    async def test_mode_event_only_on_change(self, make_clock, event_bus: EventBus) -> None:
        """Switching to the current mode publishes nothing."""
        changes = _mode_changes(event_bus)
        clock = await make_clock()

        await clock.switch_to_slave_mode()
        await clock.switch_to_master_mode()
        await clock.switch_to_master_mode()

        assert [(change.old_mode, change.new_mode) for change in changes] == [(ClockMode.SLAVE, ClockMode.MASTER)]

    @pytest.mark.asyncio
    async def test_save_and_restore(self, make_clock, gateway: InMemoryGateway) -> None:
        """Mode, time and validity are restored."""
        clock = await make_clock()
        gateway.emit_feedback(address="0/0/1", value=encode_date_time(date_time=_SAMPLE))
        clock.save_current_state()
        assert clock.saved_snapshot is not None
        assert clock.saved_snapshot.date_time == _SAMPLE

        await clock.switch_to_master_mode()
        await clock.send_time(date_time=_SAMPLE + timedelta(hours=1))

        assert await clock.restore_saved_state() is True
        assert clock.mode == ClockMode.SLAVE
        assert clock.is_broadcasting is False
        assert clock.current_date_time == _SAMPLE
        assert clock.has_valid_time is True

    @pytest.mark.asyncio
    async def test_restore_without_snapshot_raises(self, make_clock) -> None:
        """Restore needs a previous save."""
        clock = await make_clock()
        with pytest.raises(InvalidOperationException):
            await clock.restore_saved_state()

    def test_invalid_interval(self, gateway: InMemoryGateway) -> None:
        """The interval must be positive."""
        with pytest.raises(KnxValidationException):
            ClockDevice(device_id="C1", name="Clock", gateway=gateway, interval=0)

    def test_location(self, gateway: InMemoryGateway) -> None:
        """Latitude and longitude are range checked."""
        clock = ClockDevice(device_id="C1", name="Clock", gateway=gateway, latitude=48.1, longitude=11.6)
        assert (clock.latitude, clock.longitude) == (48.1, 11.6)

        with pytest.raises(KnxValidationException):
            clock.latitude = 91
        with pytest.raises(KnxValidationException):
            clock.longitude = -180.5
        assert clock.latitude == 48.1

    def test_sun_position(self, gateway: InMemoryGateway) -> None:
        """The sun position is delegated to the provider with the clock location."""
        provider = MagicMock(spec=SunPositionProviderProtocol)
        provider.get_sun_position.return_value = SunPosition.create(azimuth=-90.0, elevation=35.0)
        clock = ClockDevice(
            device_id="C1", name="Clock", gateway=gateway, latitude=48.1, longitude=11.6, sun_position_provider=provider
        )

        position = clock.get_sun_position(date_time=_SAMPLE)

        assert position.azimuth == 270.0
        assert position.is_above_horizon is True
        provider.get_sun_position.assert_called_once_with(latitude=48.1, longitude=11.6, date_time=_SAMPLE)

    def test_sun_position_without_provider(self, gateway: InMemoryGateway) -> None:
        """Without a provider there is no sun position."""
        clock = ClockDevice(device_id="C1", name="Clock", gateway=gateway)
        with pytest.raises(InvalidOperationException):
            clock.get_sun_position()
