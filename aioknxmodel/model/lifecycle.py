# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Device lifecycle.

created -> initializing -> initialized -> disposed. A failed initialization
ends in failed, from where initialize() may be retried. disposed is
terminal. Any other transition raises InvalidStateTransitionError.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Final

from aioknxmodel.const import DeviceState
from aioknxmodel.exceptions import InvalidStateTransitionError

__all__ = ["DeviceStateMachine", "VALID_DEVICE_TRANSITIONS"]

_LOGGER: Final = logging.getLogger(__name__)

VALID_DEVICE_TRANSITIONS: Final[dict[DeviceState, frozenset[DeviceState]]] = {
    DeviceState.CREATED: frozenset({DeviceState.INITIALIZING, DeviceState.DISPOSED}),
    DeviceState.INITIALIZING: frozenset({DeviceState.INITIALIZED, DeviceState.FAILED, DeviceState.DISPOSED}),
    # re-initializing re-reads the bus state
    DeviceState.INITIALIZED: frozenset({DeviceState.INITIALIZING, DeviceState.DISPOSED}),
    DeviceState.FAILED: frozenset({DeviceState.INITIALIZING, DeviceState.DISPOSED}),
    DeviceState.DISPOSED: frozenset(),
}

type StateChangeCallback = Callable[[DeviceState, DeviceState], None]


class DeviceStateMachine:
    """
    Lifecycle state of one device.

    Not thread safe; owned by the event loop of its device. The optional
    on_state_change callback receives old and new state after every
    transition. Its errors are logged and do not undo the transition.
    """

    __slots__ = ("_device_id", "_state", "on_state_change")

    def __init__(self, *, device_id: str) -> None:
        """Initialize the state machine in state created."""
        self._device_id: Final = device_id
        self._state: DeviceState = DeviceState.CREATED
        self.on_state_change: StateChangeCallback | None = None

    @property
    def is_disposed(self) -> bool:
        """Return True once the device is disposed."""
        return self._state == DeviceState.DISPOSED

    @property
    def is_initialized(self) -> bool:
        """Return True while the device is initialized."""
        return self._state == DeviceState.INITIALIZED

    @property
    def state(self) -> DeviceState:
        """Return the lifecycle state."""
        return self._state

    def can_transition_to(self, *, target: DeviceState) -> bool:
        """Return True if target is reachable from the current state."""
        return target in VALID_DEVICE_TRANSITIONS[self._state]

    def transition_to(self, *, target: DeviceState, force: bool = False) -> None:
        """Move to target. Raises InvalidStateTransitionError unless the move is allowed or forced."""
        if not (force or self.can_transition_to(target=target)):
            raise InvalidStateTransitionError(current=self._state, target=target, device_id=self._device_id)

        previous, self._state = self._state, target
        _LOGGER.debug("LIFECYCLE: %s: %s -> %s", self._device_id, previous, target)

        if (callback := self.on_state_change) is None:
            return
        try:
            callback(previous, target)
        except Exception:
            _LOGGER.exception("LIFECYCLE: State change callback failed for %s", self._device_id)
