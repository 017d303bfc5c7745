"""
In-memory bus gateway.

Records every write, answers reads from a value table and delivers feedback
to subscribers. Echo rules emulate actuators: a write to a control address
is reported back on a feedback address, optionally delayed and transformed
(e.g. one byte percentage quantization).
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
import itertools
import logging
from typing import Any, Final

from aioknxmodel.bus import ControlFeedbackPair, FeedbackEvent
from aioknxmodel.bus.value import quantize_percentage
from aioknxmodel.exceptions import CommunicationException
from aioknxmodel.type_aliases import FeedbackHandler, UnsubscribeHandler

__all__ = ["EchoRule", "InMemoryGateway", "WriteRecord"]

_LOGGER: Final = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WriteRecord:
    """A write seen by the gateway."""

    address: str
    value: Any
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True, slots=True)
class EchoRule:
    """Report writes to control on feedback."""

    control: str
    feedback: str
    delay: float = 0.0
    transform: Callable[[Any], Any] | None = None


class InMemoryGateway:
    """Bus gateway without a bus."""

    def __init__(self, *, source: str = "1.1.1") -> None:
        """Initialize the gateway."""
        self._source: Final = source
        self._handlers: list[FeedbackHandler] = []
        self._echo_rules: dict[str, list[EchoRule]] = {}
        self._read_values: dict[str, Any] = {}
        self._failing_reads: set[str] = set()
        self._echo_ids: Final = itertools.count()
        self._pending: dict[int, asyncio.TimerHandle] = {}
        self.fail_writes: bool = False
        self.reads: list[str] = []
        self.writes: list[WriteRecord] = []

    @property
    def pending_echo_count(self) -> int:
        """Return the number of scheduled, not yet delivered echoes."""
        return len(self._pending)

    @property
    def subscriber_count(self) -> int:
        """Return the number of feedback subscribers."""
        return len(self._handlers)

    @property
    def write_count(self) -> int:
        """Return the number of recorded writes."""
        return len(self.writes)

    def add_echo(
        self,
        *,
        control: str,
        feedback: str | None = None,
        delay: float = 0.0,
        transform: Callable[[Any], Any] | None = None,
    ) -> EchoRule:
        """Echo writes to control on feedback (default: control itself)."""
        rule = EchoRule(control=control, feedback=feedback or control, delay=delay, transform=transform)
        self._echo_rules.setdefault(control, []).append(rule)
        return rule

    def add_pair_echo(self, *, pair: ControlFeedbackPair, delay: float = 0.0, quantize: bool = False) -> EchoRule:
        """Echo writes of a control/feedback pair, optionally with percentage quantization."""
        return self.add_echo(
            control=pair.control,
            feedback=pair.feedback,
            delay=delay,
            transform=quantize_percentage if quantize else None,
        )

    def clear_writes(self) -> None:
        """Forget the recorded writes and reads."""
        self.writes.clear()
        self.reads.clear()

    def close(self) -> None:
        """Cancel pending echoes."""
        for handle in self._pending.values():
            handle.cancel()
        self._pending.clear()

    def emit_feedback(self, *, address: str, value: Any, source: str | None = None) -> FeedbackEvent:
        """Deliver a telegram to every subscriber in subscription order."""
        event = FeedbackEvent(address=address, value=value, source=source or self._source)
        for handler in list(self._handlers):
            handler(event)
        return event

    def fail_reads(self, *, address: str) -> None:
        """Make reads of address raise CommunicationException."""
        self._failing_reads.add(address)

    async def request_value(self, *, address: str, value_type: type) -> Any:
        """Return the configured read value of address, None if there is none."""
        self.reads.append(address)
        if address in self._failing_reads:
            raise CommunicationException(f"Read of {address} failed")
        return self._read_values.get(address)

    def set_read_value(self, *, address: str, value: Any) -> None:
        """Set the value returned for reads of address."""
        self._read_values[address] = value

    def subscribe_feedback(self, *, handler: FeedbackHandler) -> UnsubscribeHandler:
        """Subscribe to every telegram."""
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _unsubscribe

    async def write_value(self, *, address: str, value: bool | float | bytes) -> None:
        """Record the write and schedule its echoes."""
        if self.fail_writes:
            raise CommunicationException(f"Write to {address} failed")
        self.writes.append(WriteRecord(address=address, value=value))
        loop = asyncio.get_running_loop()
        for rule in self._echo_rules.get(address, []):
            echoed = rule.transform(value) if rule.transform else value
            echo_id = next(self._echo_ids)
            self._pending[echo_id] = loop.call_later(rule.delay, self._deliver_echo, echo_id, rule.feedback, echoed)

    def writes_to(self, *, address: str) -> list[Any]:
        """Return the values written to address in order."""
        return [record.value for record in self.writes if record.address == address]

    def _deliver_echo(self, echo_id: int, address: str, value: Any) -> None:
        self._pending.pop(echo_id, None)
        _LOGGER.debug("ECHO: %s <- %s", address, value)
        self.emit_feedback(address=address, value=value)
