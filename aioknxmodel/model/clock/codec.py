# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Date/time codec (DPT 19.001).

Layout of the 8 byte payload:

    byte0  year - 1900          byte4  minute (0-59)
    byte1  month (1-12)         byte5  second (0-59)
    byte2  day (1-31)           byte6  flags (0)
    byte3  weekday << 5 | hour  byte7  clock quality (0)

Weekday is 1 (Monday) to 7 (Sunday). It is written for receivers that use
it and ignored when decoding because it follows from the date.
"""

from __future__ import annotations

from datetime import datetime
from typing import Final

from aioknxmodel import i18n
from aioknxmodel.const import CLOCK_PAYLOAD_LENGTH, CLOCK_YEAR_OFFSET
from aioknxmodel.exceptions import ClockDecodeException, KnxValidationException

__all__ = ["decode_date_time", "encode_date_time"]

_HOUR_MASK: Final = 0x1F
_WEEKDAY_SHIFT: Final = 5
_YEAR_MAX: Final = CLOCK_YEAR_OFFSET + 255

# field name -> (payload index, minimum, maximum)
_FIELD_RANGES: Final[dict[str, tuple[int, int, int]]] = {
    "month": (1, 1, 12),
    "day": (2, 1, 31),
    "hour": (3, 0, 23),
    "minute": (4, 0, 59),
    "second": (5, 0, 59),
}


def encode_date_time(*, date_time: datetime) -> bytes:
    """Encode date_time into the 8 byte payload. Sub-second precision is dropped."""
    if not CLOCK_YEAR_OFFSET <= date_time.year <= _YEAR_MAX:
        raise KnxValidationException(
            i18n.tr(
                "exception.support.value_out_of_range",
                name="year",
                value=date_time.year,
                minimum=CLOCK_YEAR_OFFSET,
                maximum=_YEAR_MAX,
            )
        )
    return bytes(
        (
            date_time.year - CLOCK_YEAR_OFFSET,
            date_time.month,
            date_time.day,
            (date_time.isoweekday() << _WEEKDAY_SHIFT) | date_time.hour,
            date_time.minute,
            date_time.second,
            0,
            0,
        )
    )


def decode_date_time(*, payload: bytes) -> datetime:
    """Decode an 8 byte payload. Raises ClockDecodeException on malformed input."""
    if len(payload) < CLOCK_PAYLOAD_LENGTH:
        raise ClockDecodeException(
            i18n.tr("exception.model.clock.codec.too_short", length=len(payload), expected=CLOCK_PAYLOAD_LENGTH)
        )
    fields = {
        name: payload[index] & _HOUR_MASK if name == "hour" else payload[index]
        for name, (index, _, _) in _FIELD_RANGES.items()
    }
    for name, (_, minimum, maximum) in _FIELD_RANGES.items():
        if not minimum <= fields[name] <= maximum:
            raise ClockDecodeException(
                i18n.tr("exception.model.clock.codec.field_out_of_range", field=name, value=fields[name])
            )
    try:
        return datetime(year=CLOCK_YEAR_OFFSET + payload[0], **fields)
    except ValueError as verr:
        raise ClockDecodeException(
            i18n.tr("exception.model.clock.codec.invalid_date", payload=payload.hex(" "), reason=verr)
        ) from verr
