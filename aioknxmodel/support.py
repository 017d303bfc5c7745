# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Helper functions used within aioknxmodel."""

from __future__ import annotations

import math
from typing import Any, Final

from slugify import slugify

from aioknxmodel import i18n
from aioknxmodel.exceptions import KnxValidationException

_UNIQUE_ID_PREFIX: Final = "knx"


def extract_exc_args(*, exc: Exception) -> tuple[Any, ...] | Any:
    """Return the first arg, if there is only one arg."""
    if exc.args:
        return exc.args[0] if len(exc.args) == 1 else exc.args
    return exc


def check_range(*, name: str, value: float, minimum: float, maximum: float) -> float:
    """Return the value if it lies within [minimum, maximum], raise KnxValidationException otherwise."""
    if math.isnan(value) or not minimum <= value <= maximum:
        raise KnxValidationException(
            i18n.tr(
                "exception.support.value_out_of_range",
                name=name,
                value=value,
                minimum=minimum,
                maximum=maximum,
            )
        )
    return value


def clamp(*, value: float, minimum: float, maximum: float) -> float:
    """Clamp the value to [minimum, maximum]."""
    return max(minimum, min(maximum, value))


def is_within_tolerance(*, current: float | None, target: float, tolerance: float) -> bool:
    """Return True if current deviates from target by at most tolerance."""
    if current is None:
        return False
    return abs(current - target) <= tolerance


def generate_unique_id(*, device_type: str, device_id: str) -> str:
    """Build a slug usable as a stable identifier of a device."""
    return slugify(f"{_UNIQUE_ID_PREFIX}_{device_type}_{device_id}", separator="_")
