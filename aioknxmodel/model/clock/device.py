# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Network clock with master/slave time distribution.

Modes
-----
- master: broadcasts the current time on the time address, the first
  telegram immediately, then every interval. The current time is derived from
  a TimeAnchor, not read from the wall clock on every broadcast.
- slave: listens for time telegrams.
- slave_master: listens like a slave and arms a watchdog of twice the
  interval. Every received telegram rearms it. When it expires the clock
  assumes there is no other master and promotes itself to master.

Each timer role (broadcaster, watchdog) is one asyncio task. Every mode
switch cancels both before scheduling the tasks of the new mode.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import TYPE_CHECKING, Final

from aioknxmodel import i18n
from aioknxmodel.bus.value import as_bytes
from aioknxmodel.config import DEFAULT_MODEL_CONFIG, ModelConfig
from aioknxmodel.const import (
    CLOCK_WATCHDOG_FACTOR,
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    LATITUDE_MAX,
    LATITUDE_MIN,
    LONGITUDE_MAX,
    LONGITUDE_MIN,
    ClockMode,
    DeviceType,
)
from aioknxmodel.decorators import inspector
from aioknxmodel.event_bus import ClockModeChangedEvent
from aioknxmodel.exceptions import BaseKnxException, InvalidOperationException, KnxValidationException
from aioknxmodel.model.addresses import ClockAddresses
from aioknxmodel.model.clock.anchor import TimeAnchor
from aioknxmodel.model.clock.codec import decode_date_time, encode_date_time
from aioknxmodel.model.device import BaseDevice
from aioknxmodel.support import check_range

if TYPE_CHECKING:
    from aioknxmodel.bus.feedback import FeedbackEvent
    from aioknxmodel.event_bus import EventBus
    from aioknxmodel.interfaces import BusGatewayProtocol, SunPosition, SunPositionProviderProtocol

__all__ = ["ClockDevice", "ClockSnapshot"]

_LOGGER: Final = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ClockSnapshot:
    """Saved clock state."""

    mode: ClockMode
    date_time: datetime | None
    has_valid_time: bool


class ClockDevice(BaseDevice):
    """Clock distributing date and time on the bus."""

    __slots__ = (
        "_addresses",
        "_anchor",
        "_broadcast_task",
        "_current_date_time",
        "_has_valid_time",
        "_initial_mode",
        "_interval",
        "_last_time_received",
        "_latitude",
        "_longitude",
        "_mode",
        "_snapshot",
        "_sun_position_provider",
        "_watchdog_task",
    )

    device_type = DeviceType.CLOCK

    def __init__(
        self,
        *,
        device_id: str,
        name: str,
        gateway: BusGatewayProtocol,
        mode: ClockMode = ClockMode.SLAVE,
        interval: float | None = None,
        addresses: ClockAddresses | None = None,
        latitude: float = DEFAULT_LATITUDE,
        longitude: float = DEFAULT_LONGITUDE,
        sun_position_provider: SunPositionProviderProtocol | None = None,
        config: ModelConfig = DEFAULT_MODEL_CONFIG,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize the clock. The initial mode is applied by initialize()."""
        super().__init__(device_id=device_id, name=name, gateway=gateway, config=config, event_bus=event_bus)
        self._addresses: Final = addresses or ClockAddresses()
        self._interval: Final = config.clock_interval if interval is None else interval
        if self._interval <= 0:
            raise KnxValidationException(
                i18n.tr("exception.config.not_positive", name="interval", value=self._interval)
            )
        self._initial_mode: Final = mode
        self._mode: ClockMode = mode
        self._current_date_time: datetime | None = None
        self._last_time_received: datetime | None = None
        self._has_valid_time: bool = False
        self._anchor: TimeAnchor | None = None
        self._broadcast_task: asyncio.Task[None] | None = None
        self._watchdog_task: asyncio.Task[None] | None = None
        self._snapshot: ClockSnapshot | None = None
        self._sun_position_provider: Final = sun_position_provider
        self._latitude: float = DEFAULT_LATITUDE
        self._longitude: float = DEFAULT_LONGITUDE
        self.latitude = latitude
        self.longitude = longitude

    @property
    def addresses(self) -> ClockAddresses:
        """Return the address set."""
        return self._addresses

    @property
    def current_date_time(self) -> datetime | None:
        """
        Return the current date and time, None until known.

        In master mode the value is derived from the anchor and advances with
        monotonic time. Otherwise it is the last received or set time.
        """
        if self._mode == ClockMode.MASTER and self._anchor is not None and self._has_valid_time:
            return self._anchor.now()
        return self._current_date_time

    @property
    def has_valid_time(self) -> bool:
        """Return True once the clock knows the time."""
        return self._has_valid_time

    @property
    def interval(self) -> float:
        """Return the broadcast interval in seconds."""
        return self._interval

    @property
    def is_broadcasting(self) -> bool:
        """Return True while the broadcaster task runs."""
        return self._broadcast_task is not None and not self._broadcast_task.done()

    @property
    def is_watchdog_armed(self) -> bool:
        """Return True while the failover watchdog runs."""
        return self._watchdog_task is not None and not self._watchdog_task.done()

    @property
    def last_time_received(self) -> datetime | None:
        """Return when the last time telegram was received."""
        return self._last_time_received

    @property
    def latitude(self) -> float:
        """Return the latitude of the location in degrees."""
        return self._latitude

    @latitude.setter
    def latitude(self, value: float) -> None:
        """Set the latitude. Raises KnxValidationException outside [-90, 90]."""
        check_range(name="latitude", value=value, minimum=LATITUDE_MIN, maximum=LATITUDE_MAX)
        self._latitude = value

    @property
    def longitude(self) -> float:
        """Return the longitude of the location in degrees."""
        return self._longitude

    @longitude.setter
    def longitude(self, value: float) -> None:
        """Set the longitude. Raises KnxValidationException outside [-180, 180]."""
        check_range(name="longitude", value=value, minimum=LONGITUDE_MIN, maximum=LONGITUDE_MAX)
        self._longitude = value

    @property
    def mode(self) -> ClockMode:
        """Return the current mode."""
        return self._mode

    @property
    def saved_snapshot(self) -> ClockSnapshot | None:
        """Return the saved clock state."""
        return self._snapshot

    @property
    def watchdog_timeout(self) -> float:
        """Return the time without telegrams after which slave_master promotes itself."""
        return self._interval * CLOCK_WATCHDOG_FACTOR

    def dispose(self) -> None:
        """Cancel the timers and stop listening."""
        self._cancel_timers()
        super().dispose()

    def get_sun_position(self, *, date_time: datetime | None = None) -> SunPosition:
        """
        Return the sun position at the clock's location.

        Defaults to the current clock time, or the wall clock while the time
        is unknown. Requires a sun position provider.
        """
        if self._sun_position_provider is None:
            raise InvalidOperationException(i18n.tr("exception.model.clock.no_sun_position_provider", device=str(self)))
        return self._sun_position_provider.get_sun_position(
            latitude=self._latitude,
            longitude=self._longitude,
            date_time=date_time or self.current_date_time or datetime.now(),
        )

    @inspector
    async def initialize(self) -> None:
        """Start listening and enter the configured mode."""
        await super().initialize()
        await self._enter_mode(mode=self._initial_mode)

    @inspector
    async def restore_saved_state(self, *, timeout: float | None = None) -> bool:
        """Restore mode, time and validity. The mode is switched only if it differs."""
        await super().restore_saved_state(timeout=timeout)
        if (snapshot := self._snapshot) is None:
            return True
        if snapshot.mode != self._mode:
            await self._enter_mode(mode=snapshot.mode)
        self._current_date_time = snapshot.date_time
        self._has_valid_time = snapshot.has_valid_time
        if self._mode == ClockMode.MASTER and snapshot.date_time is not None:
            self._anchor = TimeAnchor.capture(date_time=snapshot.date_time)
        _LOGGER.debug("CLOCK: %s: Restored %s", self, snapshot)
        return True

    @inspector
    def save_current_state(self) -> None:
        """Save mode, time and validity."""
        super().save_current_state()
        self._snapshot = ClockSnapshot(
            mode=self._mode, date_time=self.current_date_time, has_valid_time=self._has_valid_time
        )

    @inspector
    async def send_time(self, *, date_time: datetime | None = None) -> None:
        """
        Write the current time to the time address.

        A given date_time becomes the current time and marks it valid. Without
        a valid time a warning is logged and nothing is written.
        """
        self._ensure_operational()
        if date_time is not None:
            self._set_time(date_time=date_time)
        await self._send_time()

    @inspector
    async def switch_to_master_mode(self) -> None:
        """Broadcast the time, seeded from the wall clock if no valid time is known."""
        self._ensure_operational()
        self._cancel_timers()
        self._set_mode(mode=ClockMode.MASTER)
        if not self._has_valid_time:
            self.synchronize_with_system_time()
        if self._current_date_time is not None:
            self._anchor = TimeAnchor.capture(date_time=self._current_date_time)
        self._broadcast_task = asyncio.get_running_loop().create_task(
            self._broadcast_loop(), name=f"clock-broadcast-{self._device_id}"
        )
        _LOGGER.info("CLOCK: %s: Master, broadcasting every %ss", self, self._interval)

    @inspector
    async def switch_to_slave_master_mode(self) -> None:
        """Listen for time telegrams and promote to master if none arrives in time."""
        self._ensure_operational()
        self._cancel_timers()
        self._set_mode(mode=ClockMode.SLAVE_MASTER)
        self._last_time_received = None
        self._arm_watchdog()
        _LOGGER.info("CLOCK: %s: Slave with failover after %ss", self, self.watchdog_timeout)

    @inspector
    async def switch_to_slave_mode(self) -> None:
        """Listen for time telegrams only."""
        self._ensure_operational()
        self._cancel_timers()
        self._set_mode(mode=ClockMode.SLAVE)
        self._last_time_received = None
        _LOGGER.info("CLOCK: %s: Slave", self)

    def synchronize_with_system_time(self) -> None:
        """Take the current time from the wall clock and re-anchor in master mode."""
        self._set_time(date_time=datetime.now())
        _LOGGER.debug("CLOCK: %s: Synchronized with system time %s", self, self._current_date_time)

    def _arm_watchdog(self) -> None:
        """Start the watchdog, replacing a running one."""
        if self._watchdog_task is not None:
            self._watchdog_task.cancel()
        self._watchdog_task = asyncio.get_running_loop().create_task(
            self._watchdog(), name=f"clock-watchdog-{self._device_id}"
        )

    async def _broadcast_loop(self) -> None:
        """Send the time now and then every interval."""
        while True:
            try:
                await self._send_time()
            except BaseKnxException as bke:
                _LOGGER.warning("CLOCK: %s: Broadcast failed: %s", self, bke)
            await asyncio.sleep(self._interval)

    def _cancel_timers(self) -> None:
        """Cancel the broadcaster and the watchdog and freeze the derived time."""
        if self._anchor is not None:
            self._current_date_time = self._anchor.now()
        for task in (self._broadcast_task, self._watchdog_task):
            if task is not None and task is not asyncio.current_task():
                task.cancel()
        self._broadcast_task = None
        self._watchdog_task = None
        self._anchor = None

    async def _enter_mode(self, *, mode: ClockMode) -> None:
        if mode == ClockMode.MASTER:
            await self.switch_to_master_mode()
        elif mode == ClockMode.SLAVE_MASTER:
            await self.switch_to_slave_master_mode()
        else:
            await self.switch_to_slave_mode()

    def _on_feedback(self, event: FeedbackEvent) -> None:
        """Decode time telegrams. Malformed payloads are logged and dropped."""
        if event.address != self._addresses.time:
            return
        try:
            received = decode_date_time(payload=as_bytes(event.value))
        except BaseKnxException as bke:
            _LOGGER.warning("CLOCK: %s: Dropping time telegram: %s", self, bke)
            return
        old_time = self._current_date_time
        self._current_date_time = received
        self._last_time_received = datetime.now()
        self._has_valid_time = True
        self._touch()
        _LOGGER.debug("CLOCK: %s: Received time %s", self, received)
        if self._mode == ClockMode.SLAVE_MASTER:
            self._arm_watchdog()
        self._on_capability_changed("time", old_time, received)

    async def _send_time(self) -> None:
        if not self._has_valid_time:
            _LOGGER.warning(i18n.tr("log.model.clock.no_valid_time", device=str(self)))
            return
        if self._mode == ClockMode.MASTER and self._anchor is not None:
            self._current_date_time = self._anchor.now()
        if self._current_date_time is None:
            return
        payload = encode_date_time(date_time=self._current_date_time)
        _LOGGER.debug("CLOCK: %s: Sending %s as %s", self, self._current_date_time, payload.hex(" "))
        await self._engine.gateway.write_value(address=self._addresses.time, value=payload)

    def _set_mode(self, *, mode: ClockMode) -> None:
        if (old_mode := self._mode) == mode:
            return
        self._mode = mode
        self._event_bus.publish_sync(
            event=ClockModeChangedEvent(
                timestamp=datetime.now(),
                device_id=self._device_id,
                old_mode=old_mode,
                new_mode=mode,
            )
        )

    def _set_time(self, *, date_time: datetime) -> None:
        """Make date_time the current time and re-anchor in master mode."""
        self._current_date_time = date_time
        self._has_valid_time = True
        if self._mode == ClockMode.MASTER:
            self._anchor = TimeAnchor.capture(date_time=date_time)

    async def _watchdog(self) -> None:
        """Promote to master unless rearmed within the watchdog timeout."""
        await asyncio.sleep(self.watchdog_timeout)
        self._watchdog_task = None
        if self._mode != ClockMode.SLAVE_MASTER or self.is_disposed:
            return
        _LOGGER.info("CLOCK: %s: No time received for %ss, promoting to master", self, self.watchdog_timeout)
        try:
            await self.switch_to_master_mode()
        except BaseKnxException as bke:
            _LOGGER.warning("CLOCK: %s: Promotion to master failed: %s", self, bke)
