# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Blockable capability.

Used for the sun protection block of shutters and for the monitoring block of
the brightness thresholds. The block flag is written and confirmed like a
lock. An optional status address reports whether the blocked automatic is
currently active.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from aioknxmodel.bus.value import as_bool
from aioknxmodel.model.capability.base import BaseCapability, ChangeHandler

if TYPE_CHECKING:
    from aioknxmodel.bus.address import ControlFeedbackPair
    from aioknxmodel.model.engine import ConfirmationEngine

__all__ = ["BlockCapability"]


class BlockCapability(BaseCapability):
    """Boolean block flag with optional activity status."""

    __slots__ = ("_addresses", "_is_active", "_is_blocked", "_saved", "_status_address")

    def __init__(
        self,
        *,
        engine: ConfirmationEngine,
        device_name: str,
        name: str,
        addresses: ControlFeedbackPair,
        status_address: str | None = None,
        on_change: ChangeHandler | None = None,
    ) -> None:
        """Initialize the capability."""
        super().__init__(engine=engine, device_name=device_name, name=name, on_change=on_change)
        self._addresses: Final = addresses
        self._status_address: Final = status_address
        self._is_blocked: bool | None = None
        self._is_active: bool | None = None
        self._saved: bool | None = None

    @property
    def addresses(self) -> ControlFeedbackPair:
        """Return the control and feedback address of the block flag."""
        return self._addresses

    @property
    def feedback_addresses(self) -> tuple[str, ...]:
        """Return the block feedback and the status address."""
        if self._status_address is None or self._status_address == self._addresses.feedback:
            return (self._addresses.feedback,)
        return (self._addresses.feedback, self._status_address)

    @property
    def has_saved_state(self) -> bool:
        """Return True if a snapshot has been taken."""
        return self._saved is not None

    @property
    def is_active(self) -> bool | None:
        """Return the reported status of the blocked automatic, None until known."""
        return self._is_active

    @property
    def is_blocked(self) -> bool | None:
        """Return the reported block flag, None until known."""
        return self._is_blocked

    @property
    def needs_restore(self) -> bool:
        """Return True if the saved flag differs from the current one."""
        return self._saved is not None and self._saved != self._is_blocked

    @property
    def saved_blocked(self) -> bool | None:
        """Return the snapshot."""
        return self._saved

    async def block(self, *, timeout: float | None = None) -> bool:
        """Set the block and wait for confirmation."""
        return await self.set_blocked(blocked=True, timeout=timeout)

    async def read_state(self) -> None:
        """Read the block feedback and the status address."""
        for address in self.feedback_addresses:
            await self._read_address(address=address, value_type=bool)

    async def restore(self, *, timeout: float | None = None) -> bool:
        """Reissue the saved block flag if it differs from the current one."""
        if not self.needs_restore or self._saved is None:
            return True
        return await self.set_blocked(blocked=self._saved, timeout=timeout)

    def save(self) -> None:
        """Copy the current block flag into the snapshot."""
        self._saved = self._is_blocked

    async def set_blocked(self, *, blocked: bool, timeout: float | None = None) -> bool:
        """Write the block flag and wait for confirmation."""
        return await self._engine.set_bit_and_confirm(
            address=self._addresses.control,
            value=blocked,
            current=lambda: self._is_blocked,
            timeout=timeout,
            description=f"{self} blocked == {blocked}",
        )

    async def unblock(self, *, timeout: float | None = None) -> bool:
        """Release the block and wait for confirmation."""
        return await self.set_blocked(blocked=False, timeout=timeout)

    async def wait_for_active_state(self, *, target_state: bool, timeout: float | None = None) -> bool:
        """Wait until the status of the blocked automatic equals target_state."""
        return await self._engine.wait_for(
            predicate=lambda: self._is_active is target_state,
            timeout=timeout,
            description=f"{self} active == {target_state}",
        )

    async def wait_for_block_state(self, *, target_state: bool, timeout: float | None = None) -> bool:
        """Wait until the block flag equals target_state."""
        return await self._engine.wait_for(
            predicate=lambda: self._is_blocked is target_state,
            timeout=timeout,
            description=f"{self} blocked == {target_state}",
        )

    def _process_feedback(self, *, address: str, value: Any) -> None:
        if address == self._addresses.feedback:
            old_blocked = self._is_blocked
            self._is_blocked = as_bool(value)
            self._changed(old_value=old_blocked, new_value=self._is_blocked)
        else:
            old_active = self._is_active
            self._is_active = as_bool(value)
            self._changed(old_value=old_active, new_value=self._is_active, field="active")
