# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
On/off capabilities: switch and lock.

Both keep a three valued state (on, off, unknown) that is written as one bit
on the control address and reported on the feedback address.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Final

from aioknxmodel import i18n
from aioknxmodel.bus.value import as_bool
from aioknxmodel.const import LockState, SwitchState
from aioknxmodel.exceptions import KnxValidationException
from aioknxmodel.model.capability.base import ChangeHandler, CommandGate, GatedCapability

if TYPE_CHECKING:
    from aioknxmodel.bus.address import ControlFeedbackPair
    from aioknxmodel.model.engine import ConfirmationEngine

__all__ = ["LockCapability", "SwitchCapability"]


class _BinaryStateCapability[S: (SwitchState, LockState)](GatedCapability):
    """Three valued on/off state behind one control bit."""

    __slots__ = ("_addresses", "_saved", "_state")

    _state_type: ClassVar[type[SwitchState] | type[LockState]]

    def __init__(
        self,
        *,
        engine: ConfirmationEngine,
        device_name: str,
        name: str,
        addresses: ControlFeedbackPair,
        on_change: ChangeHandler | None = None,
        gate: CommandGate | None = None,
    ) -> None:
        """Initialize the capability."""
        super().__init__(engine=engine, device_name=device_name, name=name, on_change=on_change, gate=gate)
        self._addresses: Final = addresses
        self._state: S = self._state_type.UNKNOWN  # type: ignore[assignment]
        self._saved: S | None = None

    @property
    def addresses(self) -> ControlFeedbackPair:
        """Return the control and feedback address."""
        return self._addresses

    @property
    def feedback_addresses(self) -> tuple[str, ...]:
        """Return the feedback address."""
        return (self._addresses.feedback,)

    @property
    def has_saved_state(self) -> bool:
        """Return True if a snapshot has been taken."""
        return self._saved is not None

    @property
    def needs_restore(self) -> bool:
        """Return True if a known saved state differs from the current one."""
        return (
            self._saved is not None and self._saved != self._state_type.UNKNOWN and self._saved != self._state
        )

    @property
    def saved_state(self) -> S | None:
        """Return the snapshot."""
        return self._saved

    @property
    def state(self) -> S:
        """Return the current state."""
        return self._state

    async def read_state(self) -> None:
        """Read the feedback address."""
        await self._read_address(address=self._addresses.feedback, value_type=bool)

    async def restore(self, *, timeout: float | None = None) -> bool:
        """Reissue the saved state if it differs from the current one."""
        if not self.needs_restore or self._saved is None:
            return True
        return await self._set_state(target=self._saved, timeout=timeout)

    def save(self) -> None:
        """Copy the current state into the snapshot."""
        self._saved = self._state

    async def wait_for_state(self, *, state: S, timeout: float | None = None) -> bool:
        """Wait until the reported state equals state."""
        return await self._engine.wait_for(
            predicate=lambda: self._state == state,
            timeout=timeout,
            description=f"{self} == {state}",
        )

    def _current_bit(self) -> bool | None:
        if self._state == self._state_type.UNKNOWN:
            return None
        return self._state == self._state_type.ON

    def _process_feedback(self, *, address: str, value: Any) -> None:
        old_state = self._state
        self._state = self._state_type.ON if as_bool(value) else self._state_type.OFF  # type: ignore[assignment]
        self._changed(old_value=old_state, new_value=self._state)

    async def _set_state(self, *, target: S, timeout: float | None) -> bool:
        if target == self._state_type.UNKNOWN:
            raise KnxValidationException(i18n.tr("exception.model.capability.unknown_target", capability=str(self)))
        await self._pass_gate()
        return await self._engine.set_bit_and_confirm(
            address=self._addresses.control,
            value=target == self._state_type.ON,
            current=self._current_bit,
            timeout=timeout,
            description=f"{self} == {target}",
        )


class SwitchCapability(_BinaryStateCapability[SwitchState]):
    """Switchable on/off capability."""

    __slots__ = ()

    _state_type = SwitchState

    @property
    def is_on(self) -> bool:
        """Return True if the switch is on."""
        return self._state == SwitchState.ON

    async def set_state(self, *, state: SwitchState, timeout: float | None = None) -> bool:
        """Switch to state and wait for confirmation."""
        return await self._set_state(target=state, timeout=timeout)

    async def toggle(self, *, timeout: float | None = None) -> bool:
        """Switch to the opposite state. An unknown state toggles to on."""
        target = SwitchState.OFF if self._state == SwitchState.ON else SwitchState.ON
        return await self._set_state(target=target, timeout=timeout)

    async def turn_off(self, *, timeout: float | None = None) -> bool:
        """Switch off and wait for confirmation."""
        return await self._set_state(target=SwitchState.OFF, timeout=timeout)

    async def turn_on(self, *, timeout: float | None = None) -> bool:
        """Switch on and wait for confirmation."""
        return await self._set_state(target=SwitchState.ON, timeout=timeout)


class LockCapability(_BinaryStateCapability[LockState]):
    """Lockable capability. A locked device rejects other commands until unlocked."""

    __slots__ = ()

    _state_type = LockState

    @property
    def is_locked(self) -> bool:
        """Return True if the lock is engaged."""
        return self._state == LockState.ON

    async def lock(self, *, timeout: float | None = None) -> bool:
        """Engage the lock and wait for confirmation."""
        return await self._set_state(target=LockState.ON, timeout=timeout)

    async def set_lock(self, *, state: LockState, timeout: float | None = None) -> bool:
        """Set the lock state and wait for confirmation."""
        return await self._set_state(target=state, timeout=timeout)

    async def unlock(self, *, timeout: float | None = None) -> bool:
        """Release the lock and wait for confirmation."""
        return await self._set_state(target=LockState.OFF, timeout=timeout)
