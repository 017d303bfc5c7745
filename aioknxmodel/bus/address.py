# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Group addresses and address derivation.

A group address has the three level form ``main/middle/sub``. Feedback
addresses are derived from their control address by adding a fixed offset to
the sub group (100 for most capabilities, 0 where the control write is
itself reported as feedback).

Public API
----------
- GroupAddress: Immutable three level group address
- ControlFeedbackPair: Control address and the address reporting its result
- derive_feedback_address: Apply a feedback offset to a control address
- make_pair: Build a ControlFeedbackPair from main/middle groups and a sub group
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from aioknxmodel import i18n
from aioknxmodel.const import GROUP_ADDRESS_MAIN_MAX, GROUP_ADDRESS_MIDDLE_MAX, GROUP_ADDRESS_SUB_MAX, FeedbackOffset
from aioknxmodel.exceptions import KnxValidationException

__all__ = [
    "ControlFeedbackPair",
    "GroupAddress",
    "derive_feedback_address",
    "make_pair",
]

_SEPARATOR: Final = "/"


@dataclass(frozen=True, slots=True)
class GroupAddress:
    """Three level group address."""

    main: int
    middle: int
    sub: int

    def __post_init__(self) -> None:
        """Validate the address levels."""
        for name, value, maximum in (
            ("main", self.main, GROUP_ADDRESS_MAIN_MAX),
            ("middle", self.middle, GROUP_ADDRESS_MIDDLE_MAX),
            ("sub", self.sub, GROUP_ADDRESS_SUB_MAX),
        ):
            if not 0 <= value <= maximum:
                raise KnxValidationException(
                    i18n.tr(
                        "exception.bus.address.level_out_of_range",
                        level=name,
                        value=value,
                        maximum=maximum,
                    )
                )

    def __str__(self) -> str:
        """Return the address in main/middle/sub notation."""
        return f"{self.main}{_SEPARATOR}{self.middle}{_SEPARATOR}{self.sub}"

    @classmethod
    def parse(cls, address: str) -> GroupAddress:
        """Parse an address in main/middle/sub notation."""
        parts = address.strip().split(_SEPARATOR)
        if len(parts) != 3 or not all(part.isdigit() for part in parts):
            raise KnxValidationException(i18n.tr("exception.bus.address.invalid_format", address=address))
        main, middle, sub = (int(part) for part in parts)
        return cls(main=main, middle=middle, sub=sub)

    def with_offset(self, *, offset: int) -> GroupAddress:
        """Return the address with the sub group shifted by offset."""
        return GroupAddress(main=self.main, middle=self.middle, sub=self.sub + offset)


@dataclass(frozen=True, slots=True)
class ControlFeedbackPair:
    """Control address and its feedback address."""

    control: str
    feedback: str

    @property
    def is_self_reporting(self) -> bool:
        """Return True if writes to the control address are reported on the same address."""
        return self.control == self.feedback


def derive_feedback_address(*, control: str, offset: int = FeedbackOffset.STANDARD) -> str:
    """Return the feedback address for a control address."""
    return str(GroupAddress.parse(control).with_offset(offset=offset))


def make_pair(
    *, group: tuple[int, int], sub_group: int | str, offset: int = FeedbackOffset.STANDARD
) -> ControlFeedbackPair:
    """Build the control/feedback pair of a capability from its main/middle group and the device sub group."""
    try:
        sub = int(sub_group)
    except ValueError as verr:
        raise KnxValidationException(i18n.tr("exception.bus.address.invalid_sub_group", sub_group=sub_group)) from verr
    control = GroupAddress(main=group[0], middle=group[1], sub=sub)
    return ControlFeedbackPair(control=str(control), feedback=str(control.with_offset(offset=offset)))
