# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Device base classes.

A device is an identity plus a set of capabilities. It owns one
FeedbackRouter (its subscription on the gateway's feedback stream), one
ConfirmationEngine and one DeviceStateMachine. Telegrams are handed to every
capability; those whose addresses match update their state.

Lifecycle
---------
- created: capabilities exist with unknown values, nothing is subscribed
- initialize(): start listening, then read every feedback address
- initialized: commands, save_current_state() and restore_saved_state() are usable
- dispose(): stop listening; idempotent

LockableDevice adds the lock gate: before a switch, percentage or movement
command is written, a locked device is unlocked first.

Public API
----------
- BaseDevice: Lifecycle, feedback dispatch, snapshots
- LockableDevice: BaseDevice with a lock capability gating the other commands
"""

from __future__ import annotations

from abc import ABC
from datetime import datetime
import logging
import time
from typing import TYPE_CHECKING, Any, ClassVar, Final

from aioknxmodel import i18n
from aioknxmodel.bus.router import FeedbackRouter
from aioknxmodel.config import DEFAULT_MODEL_CONFIG, ModelConfig
from aioknxmodel.const import DeviceState, DeviceType, LockState
from aioknxmodel.decorators import inspector
from aioknxmodel.event_bus import CapabilityUpdatedEvent, DeviceLifecycleEvent, EventBus
from aioknxmodel.exceptions import InvalidOperationException
from aioknxmodel.model.capability import LockCapability
from aioknxmodel.model.engine import ConfirmationEngine
from aioknxmodel.model.lifecycle import DeviceStateMachine
from aioknxmodel.support import generate_unique_id

if TYPE_CHECKING:
    from aioknxmodel.bus.address import ControlFeedbackPair
    from aioknxmodel.bus.feedback import FeedbackEvent
    from aioknxmodel.interfaces import BusGatewayProtocol
    from aioknxmodel.model.capability import BaseCapability

__all__ = ["BaseDevice", "LockableDevice"]

_LOGGER: Final = logging.getLogger(__name__)


class BaseDevice(ABC):
    """Base class of all devices."""

    __slots__ = (
        "_capabilities",
        "_config",
        "_device_id",
        "_engine",
        "_event_bus",
        "_has_snapshot",
        "_last_updated",
        "_last_updated_tick",
        "_name",
        "_router",
        "_state_machine",
        "_sub_group",
        "_unique_id",
    )

    device_type: ClassVar[DeviceType]

    def __init__(
        self,
        *,
        device_id: str,
        name: str,
        gateway: BusGatewayProtocol,
        sub_group: str | None = None,
        config: ModelConfig = DEFAULT_MODEL_CONFIG,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize the device."""
        self._device_id: Final = device_id
        self._name: Final = name
        self._sub_group: Final = sub_group
        self._unique_id: Final = generate_unique_id(device_type=self.device_type, device_id=device_id)
        self._config: Final = config
        self._event_bus: Final = event_bus or EventBus()
        self._engine: Final = ConfirmationEngine(
            gateway=gateway,
            name=device_id,
            default_timeout=config.default_timeout,
            poll_interval=config.poll_interval,
            tolerance=config.percentage_tolerance,
        )
        self._router: Final = FeedbackRouter(gateway=gateway, name=device_id)
        self._state_machine: Final = DeviceStateMachine(device_id=device_id)
        self._state_machine.on_state_change = self._on_lifecycle_change
        self._capabilities: Final[list[BaseCapability]] = []
        self._last_updated: datetime | None = None
        self._last_updated_tick: float | None = None
        self._has_snapshot: bool = False
        self._router.subscribe(handler=self._on_feedback)

    def __str__(self) -> str:
        """Return a readable description of the device."""
        return f"{self.device_type}:{self._device_id} ({self._name})"

    @property
    def capabilities(self) -> tuple[BaseCapability, ...]:
        """Return the composed capabilities."""
        return tuple(self._capabilities)

    @property
    def config(self) -> ModelConfig:
        """Return the model configuration."""
        return self._config

    @property
    def device_id(self) -> str:
        """Return the device id."""
        return self._device_id

    @property
    def event_bus(self) -> EventBus:
        """Return the event bus device notifications are published on."""
        return self._event_bus

    @property
    def has_saved_state(self) -> bool:
        """Return True if save_current_state() has been called."""
        return self._has_snapshot

    @property
    def is_disposed(self) -> bool:
        """Return True if the device is disposed."""
        return self._state_machine.is_disposed

    @property
    def is_initialized(self) -> bool:
        """Return True if the device is initialized."""
        return self._state_machine.is_initialized

    @property
    def last_updated(self) -> datetime | None:
        """Return when the device last received a telegram or sent a movement command."""
        return self._last_updated

    @property
    def name(self) -> str:
        """Return the device name."""
        return self._name

    @property
    def router(self) -> FeedbackRouter:
        """Return the feedback router."""
        return self._router

    @property
    def state(self) -> DeviceState:
        """Return the lifecycle state."""
        return self._state_machine.state

    @property
    def sub_group(self) -> str | None:
        """Return the sub group the addresses are derived from."""
        return self._sub_group

    @property
    def unique_id(self) -> str:
        """Return a stable identifier of the device."""
        return self._unique_id

    def dispose(self) -> None:
        """Stop listening for feedback. Safe to call more than once."""
        if self._state_machine.is_disposed:
            return
        self._router.dispose()
        self._state_machine.transition_to(target=DeviceState.DISPOSED)
        _LOGGER.debug("DISPOSE: %s disposed", self)

    @inspector
    async def initialize(self) -> None:
        """
        Start listening and seed every capability from the bus.

        Listening starts before the reads so a telegram arriving between
        read and subscription is not lost.
        """
        self._state_machine.transition_to(target=DeviceState.INITIALIZING)
        self._router.start_listening()
        try:
            for capability in self._capabilities:
                await capability.read_state()
        except Exception:
            self._router.stop_listening()
            self._state_machine.transition_to(target=DeviceState.FAILED)
            raise
        self._state_machine.transition_to(target=DeviceState.INITIALIZED)

    @inspector
    async def restore_saved_state(self, *, timeout: float | None = None) -> bool:
        """
        Reissue every saved value that differs from the current one.

        A locked device is unlocked before each change. The lock state itself
        is restored last. Returns False if any reissued command was not
        confirmed in time.
        """
        if not self._has_snapshot:
            raise InvalidOperationException(i18n.tr("exception.model.device.no_saved_state", device=str(self)))
        self._ensure_operational()
        results: list[bool] = []
        for capability in self._restore_order():
            if not capability.needs_restore:
                continue
            if not isinstance(capability, LockCapability):
                await self._ensure_unlocked(timeout=timeout)
            _LOGGER.debug("RESTORE: %s: Restoring %s", self, capability.name)
            results.append(await capability.restore(timeout=timeout))
        return all(results)

    @inspector
    def save_current_state(self) -> None:
        """Copy every current capability value into the snapshot."""
        self._ensure_operational()
        for capability in self._capabilities:
            capability.save()
        self._has_snapshot = True
        _LOGGER.debug("SAVE: %s: Saved current state", self)

    def _add_capability[C: BaseCapability](self, capability: C) -> C:
        """Attach a capability to the device."""
        self._capabilities.append(capability)
        return capability

    def _ensure_operational(self) -> None:
        """Raise if the device cannot execute commands."""
        if self._state_machine.is_disposed:
            raise InvalidOperationException(i18n.tr("exception.model.device.disposed", device=str(self)))
        if not self._state_machine.is_initialized:
            raise InvalidOperationException(i18n.tr("exception.model.device.not_initialized", device=str(self)))

    async def _ensure_unlocked(self, *, timeout: float | None = None) -> None:
        """Release the lock if the device has one and it is engaged."""

    async def _gate(self) -> None:
        """Command gate of the gated capabilities."""
        self._ensure_operational()
        await self._ensure_unlocked()

    def _on_capability_changed(self, capability: str, old_value: Any, new_value: Any) -> None:
        """Publish a capability change."""
        self._event_bus.publish_sync(
            event=CapabilityUpdatedEvent(
                timestamp=datetime.now(),
                device_id=self._device_id,
                capability=capability,
                old_value=old_value,
                new_value=new_value,
            )
        )

    def _on_feedback(self, event: FeedbackEvent) -> None:
        """Hand a telegram to every capability."""
        consumed = False
        for capability in self._capabilities:
            if capability.handle_feedback(event):
                consumed = True
        if consumed:
            self._touch()

    def _on_lifecycle_change(self, old_state: DeviceState, new_state: DeviceState) -> None:
        """Publish a lifecycle change."""
        self._event_bus.publish_sync(
            event=DeviceLifecycleEvent(
                timestamp=datetime.now(),
                device_id=self._device_id,
                old_state=old_state,
                new_state=new_state,
            )
        )

    def _restore_order(self) -> list[BaseCapability]:
        """Return the capabilities in restore order, lock last."""
        return sorted(self._capabilities, key=lambda capability: isinstance(capability, LockCapability))

    def _get_last_updated_tick(self) -> float | None:
        """Return the monotonic time of the last update."""
        return self._last_updated_tick

    def _touch(self) -> None:
        """Mark the device as updated now."""
        self._last_updated = datetime.now()
        self._last_updated_tick = time.monotonic()


class LockableDevice(BaseDevice):
    """Device with a lock that gates its other commands."""

    __slots__ = ("_lock",)

    def __init__(
        self,
        *,
        device_id: str,
        name: str,
        gateway: BusGatewayProtocol,
        lock_addresses: ControlFeedbackPair,
        sub_group: str | None = None,
        config: ModelConfig = DEFAULT_MODEL_CONFIG,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize the device."""
        super().__init__(
            device_id=device_id,
            name=name,
            gateway=gateway,
            sub_group=sub_group,
            config=config,
            event_bus=event_bus,
        )
        self._lock: Final = self._add_capability(
            LockCapability(
                engine=self._engine,
                device_name=device_id,
                name="lock",
                addresses=lock_addresses,
                on_change=self._on_capability_changed,
            )
        )

    @property
    def is_locked(self) -> bool:
        """Return True if the lock is engaged."""
        return self._lock.is_locked

    @property
    def lock_capability(self) -> LockCapability:
        """Return the lock capability."""
        return self._lock

    @property
    def lock_state(self) -> LockState:
        """Return the lock state."""
        return self._lock.state

    @property
    def saved_lock_state(self) -> LockState | None:
        """Return the saved lock state."""
        return self._lock.saved_state

    @inspector
    async def lock(self, *, timeout: float | None = None) -> bool:
        """Engage the lock."""
        self._ensure_operational()
        return await self._lock.lock(timeout=timeout)

    @inspector
    async def set_lock(self, *, state: LockState, timeout: float | None = None) -> bool:
        """Set the lock state."""
        self._ensure_operational()
        return await self._lock.set_lock(state=state, timeout=timeout)

    @inspector
    async def unlock(self, *, timeout: float | None = None) -> bool:
        """Release the lock."""
        self._ensure_operational()
        return await self._lock.unlock(timeout=timeout)

    async def wait_for_lock_state(self, *, state: LockState, timeout: float | None = None) -> bool:
        """Wait until the lock reports state."""
        return await self._lock.wait_for_state(state=state, timeout=timeout)

    async def _ensure_unlocked(self, *, timeout: float | None = None) -> None:
        """Release the lock before a gated command."""
        if not self._lock.is_locked:
            return
        _LOGGER.debug("LOCK_GATE: %s: Unlocking before command", self)
        if not await self._lock.unlock(timeout=timeout):
            _LOGGER.warning(
                i18n.tr("log.model.device.unlock_not_confirmed", device=str(self)),
            )
