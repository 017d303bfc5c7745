# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Bus gateway protocol interface.

The gateway is the only way devices talk to the bus. It is provided by the
application (a tunnelling or routing connection, a simulator, or the
in-memory gateway of aioknxmodel_test_support).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from aioknxmodel.type_aliases import FeedbackHandler, UnsubscribeHandler


@runtime_checkable
class BusGatewayProtocol(Protocol):
    """
    Protocol for bus gateway operations.

    Implemented by the application's bus connection and by the in-memory
    test gateway.
    """

    @abstractmethod
    async def request_value(self, *, address: str, value_type: type) -> Any:
        """
        Read the current value of a group address.

        Raises CommunicationException if the read fails.
        """

    @abstractmethod
    def subscribe_feedback(self, *, handler: FeedbackHandler) -> UnsubscribeHandler:
        """Subscribe to every received telegram and return the unsubscribe callable."""

    @abstractmethod
    async def write_value(self, *, address: str, value: bool | float | bytes) -> None:
        """
        Write a value to a group address.

        Raises CommunicationException if the write fails.
        """
