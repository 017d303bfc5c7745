# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Percentage controllable capability (brightness, shutter position).

Percentages are quantized to one byte on the bus, so a confirmed value may
differ from the requested one by one step. Confirmation therefore compares
with a tolerance instead of exact equality.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from aioknxmodel.bus.value import as_percentage
from aioknxmodel.const import PERCENT_MAX, PERCENT_MIN
from aioknxmodel.model.capability.base import ChangeHandler, CommandGate, GatedCapability
from aioknxmodel.support import check_range, clamp, is_within_tolerance

if TYPE_CHECKING:
    from aioknxmodel.bus.address import ControlFeedbackPair
    from aioknxmodel.model.engine import ConfirmationEngine

__all__ = ["PercentageCapability"]


class PercentageCapability(GatedCapability):
    """Value in [0, 100] with tolerant confirmation."""

    __slots__ = ("_addresses", "_percentage", "_saved")

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
        self._percentage: float | None = None
        self._saved: float | None = None

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
        """Return True if the saved value deviates from the current one by more than the tolerance."""
        if self._saved is None:
            return False
        return not is_within_tolerance(current=self._percentage, target=self._saved, tolerance=self._engine.tolerance)

    @property
    def percentage(self) -> float | None:
        """Return the reported percentage, None until known."""
        return self._percentage

    @property
    def saved_percentage(self) -> float | None:
        """Return the snapshot."""
        return self._saved

    async def adjust(self, *, delta: float, timeout: float | None = None) -> bool:
        """Change the percentage by delta, clamped to [0, 100]."""
        return await self.set_percentage(value=self.target_for_adjustment(delta=delta), timeout=timeout)

    async def read_state(self) -> None:
        """Read the feedback address."""
        await self._read_address(address=self._addresses.feedback, value_type=float)

    async def restore(self, *, timeout: float | None = None) -> bool:
        """Reissue the saved percentage if it differs from the current one."""
        if not self.needs_restore or self._saved is None:
            return True
        return await self.set_percentage(value=self._saved, timeout=timeout)

    def save(self) -> None:
        """Copy the current percentage into the snapshot."""
        self._saved = self._percentage

    async def set_percentage(self, *, value: float, timeout: float | None = None) -> bool:
        """
        Write a percentage and wait until the reported value is within tolerance.

        Raises KnxValidationException before anything is written if value is
        outside [0, 100].
        """
        check_range(name=self._name, value=value, minimum=PERCENT_MIN, maximum=PERCENT_MAX)
        await self._pass_gate()
        return await self._engine.set_percentage_and_confirm(
            address=self._addresses.control,
            value=value,
            current=lambda: self._percentage,
            timeout=timeout,
            description=f"{self} == {value}%",
        )

    def target_for_adjustment(self, *, delta: float) -> float:
        """Return the clamped target of an adjustment by delta."""
        return clamp(value=(self._percentage or PERCENT_MIN) + delta, minimum=PERCENT_MIN, maximum=PERCENT_MAX)

    async def wait_for_percentage(
        self, *, target: float, tolerance: float | None = None, timeout: float | None = None
    ) -> bool:
        """Wait until the reported percentage is within tolerance of target."""
        check_range(name=self._name, value=target, minimum=PERCENT_MIN, maximum=PERCENT_MAX)
        allowed = self._engine.tolerance if tolerance is None else tolerance
        return await self._engine.wait_for(
            predicate=lambda: is_within_tolerance(current=self._percentage, target=target, tolerance=allowed),
            timeout=timeout,
            description=f"{self} == {target}% (+/-{allowed})",
        )

    def _process_feedback(self, *, address: str, value: Any) -> None:
        old_percentage = self._percentage
        self._percentage = as_percentage(value)
        self._changed(old_value=old_percentage, new_value=self._percentage)
