# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Clock device and date/time codec.

Public API
----------
- ClockDevice: Master/slave/slave_master time distribution
- ClockSnapshot: Saved clock state
- TimeAnchor: Wall clock anchor advanced by monotonic time
- decode_date_time, encode_date_time: 8 byte DPT 19.001 codec
"""

from __future__ import annotations

from aioknxmodel.model.clock.anchor import TimeAnchor
from aioknxmodel.model.clock.codec import decode_date_time, encode_date_time
from aioknxmodel.model.clock.device import ClockDevice, ClockSnapshot

__all__ = ["ClockDevice", "ClockSnapshot", "TimeAnchor", "decode_date_time", "encode_date_time"]
