# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Activity status capability: a busy/idle flag that only feedback can change."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from aioknxmodel.bus.value import as_bool
from aioknxmodel.model.capability.base import BaseCapability, ChangeHandler

if TYPE_CHECKING:
    from aioknxmodel.model.engine import ConfirmationEngine

__all__ = ["ActivityCapability"]


class ActivityCapability(BaseCapability):
    """Read only moving/idle status."""

    __slots__ = ("_address", "_is_active")

    def __init__(
        self,
        *,
        engine: ConfirmationEngine,
        device_name: str,
        status_address: str,
        name: str = "activity",
        on_change: ChangeHandler | None = None,
    ) -> None:
        """Initialize the capability."""
        super().__init__(engine=engine, device_name=device_name, name=name, on_change=on_change)
        self._address: Final = status_address
        self._is_active: bool | None = None

    @property
    def feedback_addresses(self) -> tuple[str, ...]:
        """Return the status address."""
        return (self._address,)

    @property
    def is_active(self) -> bool | None:
        """Return True while the device reports activity, None until known."""
        return self._is_active

    @property
    def status_address(self) -> str:
        """Return the status address."""
        return self._address

    async def read_state(self) -> None:
        """Read the status address."""
        await self._read_address(address=self._address, value_type=bool)

    async def wait_for_active(self, *, timeout: float | None = None) -> bool:
        """Wait until the device reports activity."""
        return await self._engine.wait_for(
            predicate=lambda: self._is_active is True,
            timeout=timeout,
            description=f"{self} active",
        )

    async def wait_for_inactive(self, *, timeout: float | None = None) -> bool:
        """Wait until the device reports it is idle."""
        return await self._engine.wait_for(
            predicate=lambda: self._is_active is False,
            timeout=timeout,
            description=f"{self} inactive",
        )

    def _process_feedback(self, *, address: str, value: Any) -> None:
        old_value = self._is_active
        self._is_active = as_bool(value)
        self._changed(old_value=old_value, new_value=self._is_active)
