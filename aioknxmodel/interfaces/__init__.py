# SPDX-License-Identifier: MIT
# Copyright (c) 2021-2025
"""
Protocol interfaces of the collaborators aioknxmodel consumes.

Public API
----------
- BusGatewayProtocol: Write, read and feedback subscription on the bus
- SunPositionProviderProtocol: Sun position calculation used by the clock
- SunPosition: Result of a sun position calculation
"""

from __future__ import annotations

from aioknxmodel.interfaces.gateway import BusGatewayProtocol
from aioknxmodel.interfaces.sun import SunPosition, SunPositionProviderProtocol

__all__ = ["BusGatewayProtocol", "SunPosition", "SunPositionProviderProtocol"]
