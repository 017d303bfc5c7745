# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""Wall clock anchor advanced by monotonic time."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
import time

__all__ = ["TimeAnchor"]


@dataclass(frozen=True, slots=True)
class TimeAnchor:
    """
    A wall clock time paired with the monotonic tick it was captured at.

    now() adds the monotonic time elapsed since capture to the anchor, so the
    result is not affected by adjustments of the system clock.
    """

    anchor_time: datetime
    anchor_tick: float

    @classmethod
    def capture(cls, *, date_time: datetime) -> TimeAnchor:
        """Anchor date_time at the current monotonic tick."""
        return cls(anchor_time=date_time, anchor_tick=time.monotonic())

    @property
    def elapsed(self) -> timedelta:
        """Return the monotonic time since capture."""
        return timedelta(seconds=max(0.0, time.monotonic() - self.anchor_tick))

    def now(self) -> datetime:
        """Return the anchor time advanced by the elapsed monotonic time."""
        return self.anchor_time + self.elapsed
