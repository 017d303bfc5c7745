# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Typed event bus for device notifications.

Handlers subscribe to an event type and optionally to one event key (the
device id for all device events). A handler subscribed with event_key=None
receives every event of its type. Handlers may be sync or async. A failing
handler is logged and never affects the publisher or other handlers.

Public API
----------
- EventBus: Publish/subscribe dispatcher
- Event: Base class of all events
- DeviceLifecycleEvent: Device lifecycle state changed
- CapabilityUpdatedEvent: A capability value changed after feedback
- ClockModeChangedEvent: Clock role changed
"""

from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import Coroutine
from dataclasses import dataclass
from datetime import datetime
import inspect
import logging
from typing import Any, Final

from aioknxmodel.const import ClockMode, DeviceState
from aioknxmodel.type_aliases import EventHandler, UnsubscribeHandler

__all__ = [
    "CapabilityUpdatedEvent",
    "ClockModeChangedEvent",
    "DeviceLifecycleEvent",
    "Event",
    "EventBus",
]

_LOGGER: Final = logging.getLogger(__name__)
_LOGGER_EVENT: Final = logging.getLogger(f"{__package__}.event")


@dataclass(frozen=True, slots=True)
class Event:
    """Base class of all events."""

    timestamp: datetime

    @property
    def key(self) -> Any:
        """Return the key used to route the event to keyed subscribers."""
        return None


@dataclass(frozen=True, slots=True)
class DeviceLifecycleEvent(Event):
    """Device lifecycle state changed."""

    device_id: str
    old_state: DeviceState
    new_state: DeviceState

    @property
    def key(self) -> Any:
        """Return the device id."""
        return self.device_id


@dataclass(frozen=True, slots=True)
class CapabilityUpdatedEvent(Event):
    """A capability value changed after a feedback telegram."""

    device_id: str
    capability: str
    old_value: Any
    new_value: Any

    @property
    def key(self) -> Any:
        """Return the device id."""
        return self.device_id


@dataclass(frozen=True, slots=True)
class ClockModeChangedEvent(Event):
    """Clock role changed."""

    device_id: str
    old_mode: ClockMode
    new_mode: ClockMode

    @property
    def key(self) -> Any:
        """Return the device id."""
        return self.device_id


class EventBus:
    """Dispatch events to subscribed handlers."""

    __slots__ = ("_background_tasks", "_enable_event_logging", "_event_stats", "_subscriptions")

    def __init__(self, *, enable_event_logging: bool = False) -> None:
        """Initialize the event bus."""
        self._enable_event_logging: Final = enable_event_logging
        self._subscriptions: dict[type[Event], dict[Any, list[EventHandler]]] = defaultdict(lambda: defaultdict(list))
        self._event_stats: dict[str, int] = {}
        self._background_tasks: set[asyncio.Task[None]] = set()

    def clear_subscriptions(self, *, event_type: type[Event] | None = None) -> None:
        """Remove the subscriptions of one event type or all subscriptions."""
        if event_type is None:
            self._subscriptions.clear()
        else:
            self._subscriptions.pop(event_type, None)

    def get_event_stats(self) -> dict[str, int]:
        """Return the number of published events per event type name."""
        return dict(self._event_stats)

    def get_subscription_count(self, *, event_type: type[Event]) -> int:
        """Return the number of handlers subscribed to an event type."""
        if (by_key := self._subscriptions.get(event_type)) is None:
            return 0
        return sum(len(handlers) for handlers in by_key.values())

    async def publish(self, *, event: Event) -> None:
        """Publish an event and wait for all handlers, running async handlers concurrently."""
        coros: list[Coroutine[Any, Any, None]] = []
        for handler in self._prepare(event=event):
            if (coro := self._call_handler(handler=handler, event=event)) is not None:
                coros.append(coro)
        if coros:
            await asyncio.gather(*coros)

    def publish_sync(self, *, event: Event) -> None:
        """
        Publish an event from sync code.

        Sync handlers run immediately. Async handlers are scheduled on the
        running loop and dropped with a debug message if there is none.
        """
        for handler in self._prepare(event=event):
            if (coro := self._call_handler(handler=handler, event=event)) is None:
                continue
            try:
                task = asyncio.get_running_loop().create_task(coro)
            except RuntimeError:
                coro.close()
                _LOGGER.debug("PUBLISH_SYNC: No running loop for async handler of %s", type(event).__name__)
                continue
            self._background_tasks.add(task)
            task.add_done_callback(self._background_tasks.discard)

    def subscribe(self, *, event_type: type[Event], event_key: Any, handler: EventHandler) -> UnsubscribeHandler:
        """Subscribe a handler and return the callable that removes it again."""
        self._subscriptions[event_type][event_key].append(handler)

        def _unsubscribe() -> None:
            if (by_key := self._subscriptions.get(event_type)) is None:
                return
            if handler in (handlers := by_key.get(event_key, [])):
                handlers.remove(handler)
            if not handlers:
                by_key.pop(event_key, None)

        return _unsubscribe

    def _call_handler(self, *, handler: EventHandler, event: Event) -> Coroutine[Any, Any, None] | None:
        """Run a sync handler or return the guarded coroutine of an async handler."""
        if inspect.iscoroutinefunction(handler):
            return self._run_async_handler(handler=handler, event=event)
        try:
            handler(event)
        except Exception:
            _LOGGER.exception("EVENT: Handler %s failed for %s", getattr(handler, "__name__", handler), event)
        return None

    def _prepare(self, *, event: Event) -> list[EventHandler]:
        """Count the event and return the handlers it is routed to."""
        name = type(event).__name__
        self._event_stats[name] = self._event_stats.get(name, 0) + 1
        if self._enable_event_logging:
            _LOGGER_EVENT.debug("EVENT: %s", event)
        if (by_key := self._subscriptions.get(type(event))) is None:
            return []
        handlers = list(by_key.get(event.key, []))
        if event.key is not None:
            handlers.extend(by_key.get(None, []))
        return handlers

    async def _run_async_handler(self, *, handler: EventHandler, event: Event) -> None:
        try:
            await handler(event)  # type: ignore[misc]
        except Exception:
            _LOGGER.exception("EVENT: Async handler %s failed for %s", getattr(handler, "__name__", handler), event)
