# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
aioknxmodel: asyncio device model for KNX building automation.

Lights, dimmers, shutters, a network clock and a threshold simulator are
mapped onto group addresses. Commands are written through a bus gateway and
confirmed from the feedback telegrams the actuators report back.
"""

from __future__ import annotations

from aioknxmodel.const import VERSION

__version__ = VERSION

__all__ = ["__version__"]
