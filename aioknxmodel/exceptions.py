# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Exception hierarchy of aioknxmodel.

Public API
----------
- BaseKnxException: Root of all library exceptions
- KnxValidationException: Value outside its valid range or malformed input
- CommunicationException: Read or write at the bus gateway failed
- InvalidOperationException: Operation called in a state that does not allow it
- ClockDecodeException: Malformed date/time payload
- InvalidStateTransitionError: Invalid device lifecycle transition
"""

from __future__ import annotations

from typing import Any

from aioknxmodel import i18n

__all__ = [
    "BaseKnxException",
    "ClockDecodeException",
    "CommunicationException",
    "InvalidOperationException",
    "InvalidStateTransitionError",
    "KnxValidationException",
]


class BaseKnxException(Exception):
    """Base exception of aioknxmodel."""

    def __init__(self, name: str, *args: Any) -> None:
        """Initialize the exception."""
        if args and isinstance(args[0], BaseException):
            self.name = args[0].__class__.__name__
            args = _reduce_args(args=args[0].args)
        else:
            self.name = name
        super().__init__(_reduce_args(args=args))


class KnxValidationException(BaseKnxException, ValueError):
    """Value outside its valid range or otherwise invalid input."""

    def __init__(self, *args: Any) -> None:
        """Initialize the exception."""
        super().__init__("KnxValidationException", *args)


class CommunicationException(BaseKnxException):
    """Read or write at the bus gateway failed."""

    def __init__(self, *args: Any) -> None:
        """Initialize the exception."""
        super().__init__("CommunicationException", *args)


class InvalidOperationException(BaseKnxException):
    """Operation is not allowed in the current state."""

    def __init__(self, *args: Any) -> None:
        """Initialize the exception."""
        super().__init__("InvalidOperationException", *args)


class ClockDecodeException(BaseKnxException):
    """Date/time payload could not be decoded."""

    def __init__(self, *args: Any) -> None:
        """Initialize the exception."""
        super().__init__("ClockDecodeException", *args)


class InvalidStateTransitionError(BaseKnxException):
    """Raised when an invalid lifecycle transition is attempted."""

    def __init__(self, *, current: Any, target: Any, device_id: str) -> None:
        """Initialize the error."""
        self.current = current
        self.target = target
        self.device_id = device_id
        super().__init__(
            "InvalidStateTransitionError",
            i18n.tr(
                "exception.model.lifecycle.invalid_transition",
                current=current,
                target=target,
                device_id=device_id,
            ),
        )


def _reduce_args(*, args: tuple[Any, ...]) -> tuple[Any, ...] | Any:
    """Return the first arg if it is the only one."""
    return args[0] if len(args) == 1 else args
