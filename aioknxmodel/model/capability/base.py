# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Base class of all capabilities.

A capability is a small behavioral unit that owns one slice of device state,
knows the addresses it is reported on, and issues its commands through the
device's ConfirmationEngine. Devices compose capabilities by reference and
forward calls to them.

State fields of a capability are assigned in exactly one place: its
`_process_feedback` implementation. The seeding read during initialization
goes through the same path, so commands only ever wait for a field and never
set it themselves.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
import logging
from typing import TYPE_CHECKING, Any, Final

from aioknxmodel.exceptions import KnxValidationException

if TYPE_CHECKING:
    from aioknxmodel.bus.feedback import FeedbackEvent
    from aioknxmodel.model.engine import ConfirmationEngine

_LOGGER: Final = logging.getLogger(__name__)

# Called with capability name, old and new value after a feedback changed state
type ChangeHandler = Callable[[str, Any, Any], None]
# Awaited by gated commands before they write, e.g. to release a lock
type CommandGate = Callable[[], Awaitable[None]]


class BaseCapability(ABC):
    """Base class of all capabilities."""

    __slots__ = ("_device_name", "_engine", "_name", "_on_change")

    def __init__(
        self,
        *,
        engine: ConfirmationEngine,
        device_name: str,
        name: str,
        on_change: ChangeHandler | None = None,
    ) -> None:
        """Initialize the capability."""
        self._engine: Final = engine
        self._device_name: Final = device_name
        self._name: Final = name
        self._on_change: Final = on_change

    def __str__(self) -> str:
        """Return a readable description of the capability."""
        return f"{self._device_name}.{self._name}"

    @property
    @abstractmethod
    def feedback_addresses(self) -> tuple[str, ...]:
        """Return the addresses whose telegrams update this capability."""

    @property
    def has_saved_state(self) -> bool:
        """Return True if a snapshot has been taken."""
        return False

    @property
    def name(self) -> str:
        """Return the capability name."""
        return self._name

    @property
    def needs_restore(self) -> bool:
        """Return True if the saved snapshot differs from the current state."""
        return False

    def handle_feedback(self, event: FeedbackEvent) -> bool:
        """
        Process a telegram if it concerns this capability.

        Returns True if the telegram was consumed. A payload that cannot be
        converted is logged and dropped.
        """
        if event.address not in self.feedback_addresses:
            return False
        try:
            self._process_feedback(address=event.address, value=event.value)
        except KnxValidationException as kve:
            _LOGGER.warning(
                "FEEDBACK: %s: Dropped telegram on %s with value %r: %s",
                self,
                event.address,
                event.value,
                kve,
            )
        return True

    @abstractmethod
    async def read_state(self) -> None:
        """Seed the state by reading the feedback addresses."""

    async def restore(self, *, timeout: float | None = None) -> bool:
        """Reissue the saved state. Returns True if nothing had to be done."""
        return True

    def save(self) -> None:
        """Copy the current state into the snapshot."""

    async def _read_address(self, *, address: str, value_type: type) -> None:
        """Read one address and process the answer like a telegram."""
        value = await self._engine.gateway.request_value(address=address, value_type=value_type)
        _LOGGER.debug("READ_STATE: %s: %s returned %r", self, address, value)
        if value is None:
            return
        try:
            self._process_feedback(address=address, value=value)
        except KnxValidationException as kve:
            _LOGGER.warning("READ_STATE: %s: Ignored value %r of %s: %s", self, value, address, kve)

    def _changed(self, *, old_value: Any, new_value: Any, field: str | None = None) -> None:
        """Report a state change to the owning device."""
        if old_value == new_value:
            return
        name = self._name if field is None else f"{self._name}_{field}"
        _LOGGER.debug("FEEDBACK: %s.%s: %s -> %s", self._device_name, name, old_value, new_value)
        if self._on_change is not None:
            self._on_change(name, old_value, new_value)

    @abstractmethod
    def _process_feedback(self, *, address: str, value: Any) -> None:
        """Convert a payload and assign the state field it reports."""


class GatedCapability(BaseCapability):
    """Capability whose commands pass the device's command gate before writing."""

    __slots__ = ("_gate",)

    def __init__(
        self,
        *,
        engine: ConfirmationEngine,
        device_name: str,
        name: str,
        on_change: ChangeHandler | None = None,
        gate: CommandGate | None = None,
    ) -> None:
        """Initialize the capability."""
        super().__init__(engine=engine, device_name=device_name, name=name, on_change=on_change)
        self._gate: Final = gate

    async def _pass_gate(self) -> None:
        """Await the gate of the owning device."""
        if self._gate is not None:
            await self._gate()
