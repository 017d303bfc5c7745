# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Conversion of feedback payloads into the value types used by capabilities.

Gateways deliver payloads already decoded as far as they can: booleans for
one bit telegrams, numbers for scaled values and raw bytes otherwise.
Percentages travel as one byte (0..255) on the bus.
"""

from __future__ import annotations

from typing import Any

from aioknxmodel import i18n
from aioknxmodel.const import PERCENT_MAX, PERCENT_MIN, PERCENT_RAW_FACTOR, PERCENT_RAW_MAX
from aioknxmodel.exceptions import KnxValidationException
from aioknxmodel.support import check_range, clamp

_TRUE_STRINGS = frozenset({"1", "true", "on", "yes"})
_FALSE_STRINGS = frozenset({"0", "false", "off", "no"})


def percent_to_raw(percentage: float) -> int:
    """Return the one byte bus representation of a percentage."""
    check_range(name="percentage", value=percentage, minimum=PERCENT_MIN, maximum=PERCENT_MAX)
    return round(percentage * PERCENT_RAW_FACTOR)


def raw_to_percent(raw: int) -> float:
    """Return the percentage of a one byte bus value."""
    check_range(name="raw", value=raw, minimum=0, maximum=PERCENT_RAW_MAX)
    return raw / PERCENT_RAW_FACTOR


def quantize_percentage(percentage: float) -> float:
    """Return the percentage as it comes back from the bus after one byte quantization."""
    return raw_to_percent(percent_to_raw(percentage))


def as_bool(value: Any) -> bool:
    """Convert a feedback payload into a boolean."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value != 0
    if isinstance(value, bytes | bytearray):
        return bool(value) and value[-1] & 0x01 == 0x01
    if isinstance(value, str):
        if (lowered := value.strip().lower()) in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise KnxValidationException(i18n.tr("exception.bus.value.not_convertible", value=value, target="bool"))


def as_percentage(value: Any) -> float:
    """
    Convert a feedback payload into a percentage.

    Booleans map to 100/0, numbers are taken as percentages and single
    byte payloads as raw bus values.
    """
    if isinstance(value, bool):
        return PERCENT_MAX if value else PERCENT_MIN
    if isinstance(value, int | float):
        return clamp(value=float(value), minimum=PERCENT_MIN, maximum=PERCENT_MAX)
    if isinstance(value, bytes | bytearray) and len(value) == 1:
        return raw_to_percent(value[0])
    if isinstance(value, str):
        try:
            return clamp(value=float(value), minimum=PERCENT_MIN, maximum=PERCENT_MAX)
        except ValueError as verr:
            raise KnxValidationException(
                i18n.tr("exception.bus.value.not_convertible", value=value, target="percentage")
            ) from verr
    raise KnxValidationException(i18n.tr("exception.bus.value.not_convertible", value=value, target="percentage"))


def as_bytes(value: Any) -> bytes:
    """Convert a feedback payload into raw bytes."""
    if isinstance(value, bytes | bytearray):
        return bytes(value)
    if isinstance(value, list | tuple) and all(isinstance(item, int) for item in value):
        try:
            return bytes(value)
        except ValueError as verr:
            raise KnxValidationException(
                i18n.tr("exception.bus.value.not_convertible", value=value, target="bytes")
            ) from verr
    raise KnxValidationException(i18n.tr("exception.bus.value.not_convertible", value=value, target="bytes"))
