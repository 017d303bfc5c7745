# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Per device feedback routing.

The gateway publishes every received telegram on one global stream. Each
device owns a FeedbackRouter that holds the device's subscription handle on
that stream and fans telegrams out to the device's local handlers. The
router never filters; handlers decide which addresses concern them.

Failure semantics: an exception raised by a local handler is logged and
swallowed so that one faulty handler never breaks delivery to other handlers
or to other devices sharing the gateway.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from aioknxmodel import i18n
from aioknxmodel.exceptions import InvalidOperationException

if TYPE_CHECKING:
    from aioknxmodel.bus.feedback import FeedbackEvent
    from aioknxmodel.interfaces import BusGatewayProtocol
    from aioknxmodel.type_aliases import FeedbackHandler, UnsubscribeHandler

__all__ = ["FeedbackRouter"]

_LOGGER: Final = logging.getLogger(__name__)


class FeedbackRouter:
    """Isolated feedback stream of one device."""

    __slots__ = (
        "_gateway",
        "_handlers",
        "_is_disposed",
        "_name",
        "_unsubscribe_gateway",
    )

    def __init__(self, *, gateway: BusGatewayProtocol, name: str) -> None:
        """Initialize the router."""
        self._gateway: Final = gateway
        self._name: Final = name
        self._handlers: list[FeedbackHandler] = []
        self._unsubscribe_gateway: UnsubscribeHandler | None = None
        self._is_disposed: bool = False

    @property
    def handler_count(self) -> int:
        """Return the number of local handlers."""
        return len(self._handlers)

    @property
    def is_disposed(self) -> bool:
        """Return True if the router has been disposed."""
        return self._is_disposed

    @property
    def is_listening(self) -> bool:
        """Return True if the router is subscribed to the gateway."""
        return self._unsubscribe_gateway is not None

    def dispose(self) -> None:
        """Stop listening and drop all local handlers. Safe to call more than once."""
        if self._is_disposed:
            return
        self.stop_listening()
        self._handlers.clear()
        self._is_disposed = True
        _LOGGER.debug("ROUTER: %s: Disposed", self._name)

    def start_listening(self) -> None:
        """Subscribe to the gateway's feedback stream."""
        if self._is_disposed:
            raise InvalidOperationException(i18n.tr("exception.bus.router.disposed", name=self._name))
        if self.is_listening:
            return
        self._unsubscribe_gateway = self._gateway.subscribe_feedback(handler=self._on_feedback)
        _LOGGER.debug("ROUTER: %s: Started listening", self._name)

    def stop_listening(self) -> None:
        """Release the gateway subscription."""
        if (unsubscribe := self._unsubscribe_gateway) is None:
            return
        self._unsubscribe_gateway = None
        unsubscribe()
        _LOGGER.debug("ROUTER: %s: Stopped listening", self._name)

    def subscribe(self, *, handler: FeedbackHandler) -> UnsubscribeHandler:
        """Register a local handler and return the callable that removes it."""
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _unsubscribe

    def _on_feedback(self, event: FeedbackEvent) -> None:
        """Deliver one telegram to all local handlers."""
        for handler in tuple(self._handlers):
            try:
                handler(event)
            except Exception:
                _LOGGER.exception(
                    "ROUTER: %s: Handler %s failed for telegram on %s",
                    self._name,
                    getattr(handler, "__name__", handler),
                    event.address,
                )
